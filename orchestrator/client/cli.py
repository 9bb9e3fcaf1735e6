"""
Command line client for the Holiday Email Orchestrator.

Usage:
    orchestrator-client login
    orchestrator-client send --holiday Diwali --sender Asha --recipients "a@x.com, b@y.com"
    orchestrator-client logs --limit 10
    orchestrator-client logs --id <batch-id>
    orchestrator-client status
    orchestrator-client logout

The session token is kept in ORCHESTRATOR_CLIENT_SESSION_FILE between runs.
"""

import argparse
import asyncio
import getpass
import sys
from datetime import datetime, timezone

import httpx

from orchestrator.client.api import BackendClient
from orchestrator.client.config import AUDIENCE_OPTIONS, LANGUAGE_OPTIONS, ClientSettings
from orchestrator.client.form import EmailSubmitter, HolidayEmailForm, SubmissionStatus
from orchestrator.client.session import ClientSessionManager
from orchestrator.client.storage import FileSessionStorage
from orchestrator.config.logging import configure_logging
from orchestrator.db.models import BatchStatus
from orchestrator.errors import OrchestratorError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orchestrator-client",
        description="Send holiday emails through n8n and review the batch log",
    )
    parser.add_argument("--verbose", action="store_true", help="Show client log output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    login = subparsers.add_parser("login", help="Log in with the access password")
    login.add_argument("--password", help="Access password (prompted when omitted)")

    subparsers.add_parser("logout", help="Forget the stored session")
    subparsers.add_parser("status", help="Show session and configuration status")

    send = subparsers.add_parser("send", help="Submit a holiday email request")
    send.add_argument("--holiday", required=True, help="Holiday name")
    send.add_argument("--sender", required=True, help="Sender name")
    send.add_argument("--recipients", required=True, help="Comma or newline separated emails")
    send.add_argument("--tone", default="", help="Tone of the email (default: warm)")
    send.add_argument(
        "--audience",
        default=AUDIENCE_OPTIONS[0][0],
        choices=[value for value, _ in AUDIENCE_OPTIONS],
    )
    send.add_argument(
        "--language",
        default=LANGUAGE_OPTIONS[0][0],
        choices=[value for value, _ in LANGUAGE_OPTIONS],
    )

    logs = subparsers.add_parser("logs", help="List logged email batches")
    logs.add_argument("--id", dest="batch_id", help="Show one batch with its recipients")
    logs.add_argument("--limit", type=int, default=50)
    logs.add_argument("--offset", type=int, default=0)
    logs.add_argument("--status", choices=[s.value for s in BatchStatus])

    return parser


def _format_expiry(expires_at_ms: int) -> str:
    return datetime.fromtimestamp(expires_at_ms / 1000, tz=timezone.utc).isoformat(timespec="seconds")


async def _login(settings: ClientSettings, session: ClientSessionManager, args) -> int:
    if settings.access_password_hint:
        print(f"Hint: {settings.access_password_hint}")
    password = args.password or getpass.getpass("Password: ")

    if await session.login(password):
        print(f"Logged in. Session valid until {_format_expiry(session.expires_at)}")
        return 0

    print(f"Login failed: {session.error}", file=sys.stderr)
    return 1


async def _status(settings: ClientSettings, session: ClientSessionManager) -> int:
    if session.is_authenticated:
        print(f"Session: active until {_format_expiry(session.expires_at)}")
    else:
        print("Session: not logged in")

    print(f"Webhook: {settings.webhook_url} ({settings.get_backend_label()})")
    print(f"API: {settings.api_base_url}")
    if settings.is_webhook_url_unconfigured():
        print("Warning: webhook URL is not configured (set ORCHESTRATOR_CLIENT_WEBHOOK_URL)")
    if not settings.is_security_configured():
        print("Warning: API key or n8n secret is not configured")
    return 0


async def _send(submitter: EmailSubmitter, args) -> int:
    form = HolidayEmailForm(
        holiday_name=args.holiday,
        sender_name=args.sender,
        recipients=args.recipients,
        tone=args.tone,
        audience_type=args.audience,
        language=args.language,
    )
    result = await submitter.submit(form)
    await submitter.wait_for_pending()

    if result.status == SubmissionStatus.INVALID:
        for field_name, message in result.errors.items():
            print(f"{field_name}: {message}", file=sys.stderr)
        return 2

    print(result.message, file=sys.stdout if result.ok else sys.stderr)
    return 0 if result.ok else 1


async def _logs(backend: BackendClient, args) -> int:
    if args.batch_id:
        batch = await backend.get_email_batch(args.batch_id)
        print(f"{batch['holidayName']} from {batch['senderName']} [{batch['status']}]")
        print(f"Created: {batch['createdAt']}")
        if batch.get("errorMessage"):
            print(f"Error: {batch['errorMessage']}")
        for recipient in batch["recipients"]:
            print(f"  {recipient['email']}")
        return 0

    data = await backend.get_email_logs(limit=args.limit, offset=args.offset, status=args.status)
    if not data["logs"]:
        print("No email batches logged yet.")
        return 0

    for log in data["logs"]:
        line = (
            f"{log['createdAt']}  {log['status']:<6}  {log['holidayName']}  "
            f"{log['senderName']}  recipients={log['recipientCount']}  id={log['id']}"
        )
        print(line)
    print(f"Showing {len(data['logs'])} of {data['total']}")
    return 0


async def run_command(args, settings: ClientSettings | None = None) -> int:
    """Execute a parsed command and return the exit status."""
    settings = settings or ClientSettings()

    async with httpx.AsyncClient() as http_client:
        session = ClientSessionManager(settings, FileSessionStorage(settings.session_file), http_client)
        await session.initialize()
        backend = BackendClient(settings, session, http_client)

        if args.command == "login":
            return await _login(settings, session, args)
        if args.command == "logout":
            session.logout()
            print("Logged out.")
            return 0
        if args.command == "status":
            return await _status(settings, session)

        if not session.is_authenticated:
            print("Not logged in. Run 'orchestrator-client login' first.", file=sys.stderr)
            return 1

        try:
            if args.command == "send":
                return await _send(EmailSubmitter(settings, backend, http_client), args)
            return await _logs(backend, args)
        except OrchestratorError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level="INFO" if args.verbose else "WARNING", json_format=False)
    return asyncio.run(run_command(args))


if __name__ == "__main__":
    sys.exit(main())
