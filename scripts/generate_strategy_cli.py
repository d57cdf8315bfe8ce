#!/usr/bin/env python3
"""
Generate a marketing strategy via the API endpoint (same behavior as web UI)

This script posts a multipart form to /api/generate-strategy and prints
the resulting strategy JSON.

Usage:
    python3 scripts/generate_strategy_cli.py <client_name> <industry> [options]

Examples:
    python3 scripts/generate_strategy_cli.py "Acme" "SaaS" --transcript-file notes.txt
    python3 scripts/generate_strategy_cli.py "Acme" "SaaS" --meeting-link "https://fathom.video/share/abc123"
    python3 scripts/generate_strategy_cli.py "Acme" "SaaS" --audit-deck deck.pdf --website https://acme.com

Options:
    --website           Client website URL
    --social            Social profile URL
    --transcript-file   Text file with the meeting transcript
    --meeting-link      Link to a meeting transcript or Fathom recording
    --recording-file    Audio/video recording to transcribe
    --audit-link        Link to the audit deck (Google Docs/Slides/Drive or web page)
    --audit-deck        Audit deck file (PDF text is extracted)
    --api-url           API server URL (default: http://localhost:8000)

Environment Variables:
    API_URL             Alternative to --api-url flag
"""

import argparse
import json
import os
import sys
from pathlib import Path

import httpx


def build_form(args: argparse.Namespace):
    """Build the form fields and files for the request"""
    data = {
        'clientName': args.client_name,
        'industry': args.industry,
        'websiteUrl': args.website or '',
        'socialProfile': args.social or '',
    }
    files = {}

    if args.transcript_file:
        data['meetingRecordingType'] = 'transcript'
        data['meetingRecordingContent'] = Path(args.transcript_file).read_text(encoding='utf-8')
    elif args.meeting_link:
        data['meetingRecordingType'] = 'link'
        data['meetingRecordingContent'] = args.meeting_link
    elif args.recording_file:
        data['meetingRecordingType'] = 'file'
        path = Path(args.recording_file)
        files['meetingRecordingFile'] = (path.name, path.read_bytes())

    if args.audit_link:
        data['auditLink'] = args.audit_link
    if args.audit_deck:
        path = Path(args.audit_deck)
        files['auditDeck'] = (path.name, path.read_bytes())

    return data, files


def main():
    parser = argparse.ArgumentParser(description="Generate a marketing strategy from onboarding material")
    parser.add_argument('client_name', help='Client name')
    parser.add_argument('industry', help='Client industry')
    parser.add_argument('--website', help='Client website URL')
    parser.add_argument('--social', help='Social profile URL')

    meeting = parser.add_mutually_exclusive_group()
    meeting.add_argument('--transcript-file', help='Text file with the meeting transcript')
    meeting.add_argument('--meeting-link', help='Link to a transcript or Fathom recording')
    meeting.add_argument('--recording-file', help='Audio/video recording to transcribe')

    parser.add_argument('--audit-link', help='Link to the audit deck')
    parser.add_argument('--audit-deck', help='Audit deck file')
    parser.add_argument('--api-url', default=os.getenv('API_URL', 'http://localhost:8000'),
                        help='API server URL')
    args = parser.parse_args()

    data, files = build_form(args)

    print(f"📡 Requesting strategy for {args.client_name} from {args.api_url}...", file=sys.stderr)

    try:
        response = httpx.post(
            f"{args.api_url.rstrip('/')}/api/generate-strategy",
            data=data,
            files=files or None,
            timeout=600
        )
    except httpx.HTTPError as e:
        print(f"❌ Request failed: {e}", file=sys.stderr)
        sys.exit(1)

    body = response.json()

    if response.status_code != 200:
        print(f"❌ {body.get('error', 'Unknown error')}", file=sys.stderr)
        if body.get('help'):
            print(f"   {body['help']}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(body['strategy'], indent=2, ensure_ascii=False))


if __name__ == '__main__':
    main()
