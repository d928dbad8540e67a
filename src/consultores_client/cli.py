"""Command-line entrypoint for session and consultant commands."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from consultores_client.domain.consultant import Consultant, ConsultantInput, ConsultantUpdate
from consultores_client.errors import (
    AuthenticationError,
    ConsultantApiError,
    NotAuthenticatedError,
    RefreshError,
)
from consultores_client.observability.logging import configure_logging
from consultores_client.observability.tracing import configure_tracing, shutdown_tracing
from consultores_client.runtime.bootstrap import (
    RuntimeContext,
    build_runtime,
    close_runtime_resources,
    start_runtime,
)

Handler = Callable[[RuntimeContext, argparse.Namespace], Awaitable[Any]]

_MESSAGES: tuple[tuple[type[Exception], str], ...] = (
    (AuthenticationError, "Could not authenticate. Check the e-mail and password."),
    (NotAuthenticatedError, "Not logged in. Run `consultores login` first."),
    (RefreshError, "The session could not be renewed. Log in again."),
)


def describe_error(exc: Exception) -> str:
    """Map a failure to the message shown to the user."""
    for error_type, message in _MESSAGES:
        if isinstance(exc, error_type):
            return message
    if isinstance(exc, ConsultantApiError):
        return f"Consultant request failed: {exc}"
    return str(exc)


def _consultant_json(consultant: Consultant) -> dict[str, Any]:
    return consultant.model_dump(by_alias=True, exclude_none=True)


async def _login(runtime: RuntimeContext, args: argparse.Namespace) -> dict[str, Any]:
    if not runtime.settings.firebase_api_key_value:
        raise RuntimeError("FIREBASE_API_KEY must be set to log in")
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    await runtime.session_manager.login(args.email, password)
    return _whoami_payload(runtime)


async def _logout(runtime: RuntimeContext, args: argparse.Namespace) -> dict[str, Any]:
    runtime.session_manager.logout()
    return _whoami_payload(runtime)


async def _whoami(runtime: RuntimeContext, args: argparse.Namespace) -> dict[str, Any]:
    return _whoami_payload(runtime)


def _whoami_payload(runtime: RuntimeContext) -> dict[str, Any]:
    manager = runtime.session_manager
    return {
        "authenticated": manager.is_authenticated,
        "email": manager.current_user_identifier,
        "state": manager.state.value,
    }


async def _list(runtime: RuntimeContext, args: argparse.Namespace) -> list[dict[str, Any]]:
    consultants = await runtime.require_consultant_client().list()
    consultants.sort(key=lambda consultant: consultant.name.casefold())
    return [_consultant_json(consultant) for consultant in consultants]


async def _get(runtime: RuntimeContext, args: argparse.Namespace) -> dict[str, Any]:
    consultant = await runtime.require_consultant_client().get(args.id)
    return _consultant_json(consultant)


async def _create(runtime: RuntimeContext, args: argparse.Namespace) -> dict[str, Any]:
    payload = ConsultantInput(
        name=args.name.strip(),
        email=args.email.strip(),
        phone=_optional(args.phone),
        area=_optional(args.area),
    )
    consultant = await runtime.require_consultant_client().create(payload)
    return _consultant_json(consultant)


async def _update(runtime: RuntimeContext, args: argparse.Namespace) -> dict[str, Any]:
    payload = ConsultantUpdate(
        id=args.id,
        name=_optional(args.name),
        email=_optional(args.email),
        phone=_optional(args.phone),
        area=_optional(args.area),
    )
    result = await runtime.require_consultant_client().update(payload)
    return result.model_dump()


async def _delete(runtime: RuntimeContext, args: argparse.Namespace) -> dict[str, Any]:
    result = await runtime.require_consultant_client().remove(args.id)
    return result.model_dump()


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="consultores",
        description="Manage consultant records through an authenticated session.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Sign in and store the session locally.")
    login.add_argument("--email", required=True)
    login.add_argument("--password", help="Password; prompted for when omitted.")
    login.set_defaults(handler=_login)

    commands.add_parser("logout", help="Forget the stored session.").set_defaults(handler=_logout)
    commands.add_parser("whoami", help="Show the authentication state.").set_defaults(handler=_whoami)
    commands.add_parser("list", help="List consultants sorted by name.").set_defaults(handler=_list)

    get = commands.add_parser("get", help="Fetch one consultant.")
    get.add_argument("id")
    get.set_defaults(handler=_get)

    create = commands.add_parser("create", help="Register a consultant.")
    create.add_argument("--name", required=True)
    create.add_argument("--email", required=True)
    create.add_argument("--phone")
    create.add_argument("--area")
    create.set_defaults(handler=_create)

    update = commands.add_parser("update", help="Update fields of a consultant.")
    update.add_argument("id")
    update.add_argument("--name")
    update.add_argument("--email")
    update.add_argument("--phone")
    update.add_argument("--area")
    update.set_defaults(handler=_update)

    delete = commands.add_parser("delete", help="Remove a consultant.")
    delete.add_argument("id")
    delete.set_defaults(handler=_delete)
    return parser


async def _run(handler: Handler, args: argparse.Namespace) -> Any:
    runtime = build_runtime()
    try:
        await start_runtime(runtime)
        return await handler(runtime, args)
    finally:
        await close_runtime_resources(runtime)


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging()
    configure_tracing(service_name="consultores-client")

    try:
        result = asyncio.run(_run(args.handler, args))
    except KeyboardInterrupt:
        raise
    except Exception as exc:
        raise SystemExit(describe_error(exc)) from exc
    finally:
        shutdown_tracing()

    print(json.dumps(result, ensure_ascii=False))


__all__ = ["build_parser", "describe_error", "main"]
