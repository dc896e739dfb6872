"""
Operator command line

Usage:
    webgate serve
    webgate start | stop | status
    webgate alogin <email>
    webgate reg list [all|pending|accepted|denied]
    webgate reg accept <ign>
    webgate reg deny <ign> <reason...>
    webgate email <recipient> <message...>
    webgate dwipe confirm
"""
import argparse
import logging
import os
import signal
import subprocess
import sys
from typing import List, Optional

from webgate.configuration import get_settings
from webgate.constants import CONSOLE_ACTOR, TEXT_EMAIL_SUBJECT
from webgate.database import SessionLocal, init_db, reset_database
from webgate.services import allowlist
from webgate.services.account_store import AccountStore
from webgate.services.notifier import Notifier
from webgate.services.registration_workflow import ListFilter, RegistrationWorkflow
from webgate.utils.tokens import generate_secure_password

logger = logging.getLogger(__name__)


# ===== Server lifecycle =====

def _read_pid(pid_file: str) -> Optional[int]:
    try:
        with open(pid_file, "r", encoding="utf-8") as f:
            return int(f.read().strip())
    except (OSError, ValueError):
        return None


def _is_running(pid: Optional[int]) -> bool:
    if not pid:
        return False
    try:
        os.kill(pid, 0)
    except OSError:
        return False
    return True


def cmd_serve(args) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "webgate.main:app",
        host=args.host or settings.SERVER_HOST,
        port=args.port or settings.SERVER_PORT,
    )
    return 0


def cmd_start(args) -> int:
    settings = get_settings()
    pid = _read_pid(settings.SERVER_PID_FILE)
    if _is_running(pid):
        print(f"webgate server is already running (pid {pid}).")
        return 1

    argv = [sys.executable, "-m", "webgate.cli", "serve"]
    if args.host:
        argv += ["--host", args.host]
    if args.port:
        argv += ["--port", str(args.port)]

    if os.name == "nt":
        flags = int(getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0))
        flags |= int(getattr(subprocess, "DETACHED_PROCESS", 0))
        process = subprocess.Popen(argv, creationflags=flags)
    else:
        process = subprocess.Popen(argv, start_new_session=True)

    with open(settings.SERVER_PID_FILE, "w", encoding="utf-8") as f:
        f.write(str(process.pid))
    print(f"webgate server started (pid {process.pid}).")
    return 0


def cmd_stop(args) -> int:
    settings = get_settings()
    pid = _read_pid(settings.SERVER_PID_FILE)
    if not _is_running(pid):
        print("webgate server is not running.")
        if os.path.exists(settings.SERVER_PID_FILE):
            os.remove(settings.SERVER_PID_FILE)
        return 1

    os.kill(pid, signal.SIGTERM)
    os.remove(settings.SERVER_PID_FILE)
    print(f"webgate server stopped (pid {pid}).")
    return 0


def cmd_status(args) -> int:
    pid = _read_pid(get_settings().SERVER_PID_FILE)
    if _is_running(pid):
        print(f"webgate server is running (pid {pid}).")
    else:
        print("webgate server is not running.")
    return 0


# ===== Accounts =====

def cmd_alogin(args) -> int:
    """Create or rotate an operator credential; the password is shown only here."""
    email = args.email.strip().lower()
    password = generate_secure_password()

    init_db()
    db = SessionLocal()
    try:
        AccountStore(db).create_or_update_operator(email, password)
    finally:
        db.close()

    print("Admin account created/updated!")
    print(f"Email: {email}")
    print(f"Password: {password}")
    print("Password is only shown once!")
    return 0


# ===== Registrations =====

def cmd_reg_list(args) -> int:
    status_filter = ListFilter(args.type)
    db = SessionLocal()
    try:
        requests = RegistrationWorkflow(db).list(status_filter)
        if not requests:
            print(f"No users found for type: {status_filter.value}")
            return 0

        print(f"=== {status_filter.value.upper()} Users ===")
        for r in requests:
            print(
                f"IGN: {r.ign}, Discord: {r.discord}, Telegram: {r.telegram}, "
                f"Email: {r.email}, Type: {r.category}"
            )
    finally:
        db.close()
    return 0


def cmd_reg_accept(args) -> int:
    ign = args.ign.replace('"', "")
    db = SessionLocal()
    try:
        accepted = RegistrationWorkflow(db).accept(ign, CONSOLE_ACTOR)
    finally:
        db.close()

    if accepted is None:
        print(f"User {ign} not found.")
        return 1

    print(f"User {accepted.identifier} accepted; proceed to whitelist.")
    settings = get_settings()
    for command in allowlist.render_commands(accepted, settings):
        if not allowlist.dispatch(command, settings):
            print(f"Run on the game server: {command}")

    Notifier(settings).deliver_template(
        accepted.email,
        "acceptance",
        {"ign": accepted.identifier, "accepted_by": CONSOLE_ACTOR},
    )
    return 0


def cmd_reg_deny(args) -> int:
    ign = args.ign.replace('"', "")
    reason = " ".join(args.reason)
    db = SessionLocal()
    try:
        denied = RegistrationWorkflow(db).deny(ign, CONSOLE_ACTOR, reason)
        email = denied.email if denied is not None else None
    finally:
        db.close()

    if denied is None:
        print(f"User {ign} not found in 'users'.")
        return 1

    print(f"User {ign} denied. Reason: {reason}")
    Notifier().deliver_template(
        email, "denial", {"ign": ign, "denied_by": CONSOLE_ACTOR, "reason": reason}
    )
    return 0


# ===== Misc =====

def cmd_email(args) -> int:
    text = " ".join(args.message)
    if not Notifier().deliver(args.recipient, TEXT_EMAIL_SUBJECT, text):
        print(f"Email to {args.recipient} was not sent (see log).")
        return 1
    print(f"Email sent to {args.recipient} subject '{TEXT_EMAIL_SUBJECT}'")
    return 0


def cmd_dwipe(args) -> int:
    if args.confirmation != "confirm":
        print("This deletes ALL data. Run 'webgate dwipe confirm' to proceed.")
        return 1

    reset_database()
    print("All tables dropped and recreated empty.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="webgate", description="webgate operator tools")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_text in (
        ("serve", cmd_serve, "Run the HTTP server in the foreground"),
        ("start", cmd_start, "Start the HTTP server in the background"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--host", default=None)
        p.add_argument("--port", type=int, default=None)
        p.set_defaults(func=func)

    sub.add_parser("stop", help="Stop the background server").set_defaults(func=cmd_stop)
    sub.add_parser("status", help="Show whether the server is running").set_defaults(func=cmd_status)

    p = sub.add_parser("alogin", help="Create or update an operator account")
    p.add_argument("email")
    p.set_defaults(func=cmd_alogin)

    reg = sub.add_parser("reg", help="Manage registration requests")
    reg_sub = reg.add_subparsers(dest="reg_command", required=True)

    p = reg_sub.add_parser("list", help="List registrations")
    p.add_argument("type", nargs="?", default=ListFilter.ALL.value, choices=[f.value for f in ListFilter])
    p.set_defaults(func=cmd_reg_list)

    p = reg_sub.add_parser("accept", help="Accept a pending registration")
    p.add_argument("ign")
    p.set_defaults(func=cmd_reg_accept)

    p = reg_sub.add_parser("deny", help="Deny a pending registration")
    p.add_argument("ign")
    p.add_argument("reason", nargs="+")
    p.set_defaults(func=cmd_reg_deny)

    p = sub.add_parser("email", help="Send a plain text email")
    p.add_argument("recipient")
    p.add_argument("message", nargs="+")
    p.set_defaults(func=cmd_email)

    p = sub.add_parser("dwipe", help="Drop and recreate every table")
    p.add_argument("confirmation", nargs="?", default="")
    p.set_defaults(func=cmd_dwipe)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
