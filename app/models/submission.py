"""
Submission and normalized-record models for the content pipeline
"""

from dataclasses import dataclass
from typing import Optional


MEETING_RECORDING_TYPES = ('transcript', 'link', 'file')


@dataclass(frozen=True)
class UploadedFile:
    """An uploaded binary with its original filename"""
    filename: str
    data: bytes


@dataclass(frozen=True)
class MeetingRecording:
    """Meeting recording as submitted: inline transcript, link, or file"""
    kind: str
    content: Optional[str] = None
    file: Optional[UploadedFile] = None


@dataclass(frozen=True)
class SubmissionInput:
    """One onboarding form submission"""
    client_name: str
    industry: str
    website_url: Optional[str] = None
    social_profile: Optional[str] = None
    meeting_recording: Optional[MeetingRecording] = None
    audit_deck_file: Optional[UploadedFile] = None
    audit_link: Optional[str] = None


@dataclass
class NormalizedRecord:
    """
    Plain-text view of a submission, ready for the prompt

    Content fields are None when the source was absent, and a bracketed
    placeholder when the source was present but could not be extracted.
    """
    client_name: str
    industry: str
    website_url: Optional[str] = None
    social_profile: Optional[str] = None
    meeting_transcript: Optional[str] = None
    audit_deck_content: Optional[str] = None
    website_content: Optional[str] = None
    social_content: Optional[str] = None
