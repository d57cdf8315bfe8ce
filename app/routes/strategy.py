"""
Strategy Generation Routes

Endpoint for turning an onboarding form submission into a marketing strategy.
"""

import asyncio
import logging
from typing import Iterator, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from app.models.strategy import StrategyResponse
from app.models.submission import MEETING_RECORDING_TYPES, MeetingRecording, SubmissionInput, UploadedFile
from app.services.content_aggregator import ContentAggregator
from app.services.strategy_generator import StrategyGenerator
from core.exceptions import MissingRequiredField, is_auth_error

logger = logging.getLogger(__name__)

router = APIRouter()

AUTH_ERROR_MESSAGE = "Authentication failed. Please check your Anthropic API key configuration."
AUTH_ERROR_HELP = "Set ANTHROPIC_API_KEY environment variable or run 'claude login' to authenticate via CLI."


def get_content_aggregator() -> Iterator[ContentAggregator]:
    """Per-request aggregator; its HTTP session is closed after the response"""
    aggregator = ContentAggregator()
    try:
        yield aggregator
    finally:
        aggregator.close()


def get_strategy_generator() -> StrategyGenerator:
    return StrategyGenerator()


async def _read_upload(upload: Optional[UploadFile]) -> Optional[UploadedFile]:
    """Read an uploaded file, treating an empty form part as no file"""
    if upload is None or not upload.filename:
        return None

    data = await upload.read()
    if not data:
        return None
    return UploadedFile(filename=upload.filename, data=data)


async def build_submission(
    client_name: str,
    industry: str,
    website_url: Optional[str],
    social_profile: Optional[str],
    meeting_recording_type: Optional[str],
    meeting_recording_content: Optional[str],
    meeting_recording_file: Optional[UploadFile],
    audit_deck: Optional[UploadFile],
    audit_link: Optional[str]
) -> SubmissionInput:
    """Convert raw form fields into a SubmissionInput"""
    meeting_recording = None

    if meeting_recording_type in MEETING_RECORDING_TYPES:
        recording_file = None
        if meeting_recording_type == 'file':
            recording_file = await _read_upload(meeting_recording_file)

        if meeting_recording_content or recording_file:
            meeting_recording = MeetingRecording(
                kind=meeting_recording_type,
                content=meeting_recording_content or None,
                file=recording_file
            )
    elif meeting_recording_type:
        logger.warning(f"⚠️ Ignoring unknown meetingRecordingType: {meeting_recording_type}")

    return SubmissionInput(
        client_name=client_name,
        industry=industry,
        website_url=website_url or None,
        social_profile=social_profile or None,
        meeting_recording=meeting_recording,
        audit_deck_file=await _read_upload(audit_deck),
        audit_link=audit_link or None,
    )


@router.post("/generate-strategy", response_model=StrategyResponse)
async def generate_strategy(
    client_name: str = Form("", alias="clientName"),
    industry: str = Form(""),
    website_url: Optional[str] = Form(None, alias="websiteUrl"),
    social_profile: Optional[str] = Form(None, alias="socialProfile"),
    meeting_recording_type: Optional[str] = Form(None, alias="meetingRecordingType"),
    meeting_recording_content: Optional[str] = Form(None, alias="meetingRecordingContent"),
    meeting_recording_file: Optional[UploadFile] = File(None, alias="meetingRecordingFile"),
    audit_deck: Optional[UploadFile] = File(None, alias="auditDeck"),
    audit_link: Optional[str] = Form(None, alias="auditLink"),
    aggregator: ContentAggregator = Depends(get_content_aggregator),
    generator: StrategyGenerator = Depends(get_strategy_generator)
):
    """
    Generate a marketing strategy from onboarding material

    Returns:
        {"strategy": Strategy} on success, {"error", "details"?, "help"?} on failure
    """
    try:
        submission = await build_submission(
            client_name,
            industry,
            website_url,
            social_profile,
            meeting_recording_type,
            meeting_recording_content,
            meeting_recording_file,
            audit_deck,
            audit_link
        )

        logger.info(f"📡 Generating strategy for: {submission.client_name}")

        record = await aggregator.aggregate(submission)
        strategy = await asyncio.to_thread(generator.generate, record)

        return {"strategy": strategy}

    except MissingRequiredField as e:
        logger.warning(f"⚠️ Rejected submission: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e)}
        )

    except Exception as e:
        logger.error(f"❌ Error generating strategy: {e}", exc_info=True)
        error_message = str(e) or e.__class__.__name__

        if is_auth_error(e):
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={
                    "error": AUTH_ERROR_MESSAGE,
                    "details": error_message,
                    "help": AUTH_ERROR_HELP
                }
            )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": f"Failed to generate strategy: {error_message}"}
        )
