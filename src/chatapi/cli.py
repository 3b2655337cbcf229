#!/usr/bin/env python3
"""Command line client for the chat API.

Subcommands:
  login / register / logout   -> manage the cached session
  threads                     -> list conversations
  show <id>                   -> print a conversation
  new <content>               -> start a conversation from a first message
  send <id> <content>         -> add a message to a conversation
  rename <id> <title>         -> change a conversation's title
  delete <id>                 -> delete a conversation and its messages
  serve                       -> run the API server

Exit codes:
  0 success
  1 request failed (message printed to stderr)
  2 usage / argument errors
  3 not signed in or session expired
"""
from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from typing import Awaitable, Callable, List

from chatapi.client import (
    ApiClient,
    ApiError,
    AuthClient,
    AuthError,
    ChatClient,
    SessionExpiredError,
    SessionStore,
)
from chatapi.client.render import render_thread, render_thread_list
from chatapi.core.config import ClientSettings, get_client_settings

EXIT_FAILED = 1
EXIT_SESSION = 3


def _sessions(settings: ClientSettings) -> SessionStore:
    return SessionStore(settings.session_file)


def _auth_client(settings: ClientSettings) -> AuthClient:
    if not settings.auth_url or not settings.auth_public_key:
        raise AuthError("SUPABASE_URL and SUPABASE_ANON_KEY must be set to sign in")
    return AuthClient(
        settings.auth_url,
        settings.auth_public_key.get_secret_value(),
        timeout=settings.timeout_seconds,
    )


def _submitting(label: str) -> None:
    # the only UI state: a request is in flight
    print(f"{label}...", file=sys.stderr, flush=True)


async def _with_chat(
    settings: ClientSettings, action: Callable[[ChatClient], Awaitable[int]]
) -> int:
    api = ApiClient(
        settings.api_url,
        _sessions(settings),
        login_path=settings.login_path,
        timeout=settings.timeout_seconds,
    )
    async with api:
        try:
            return await action(ChatClient(api))
        except SessionExpiredError as exc:
            print(f"Session expired. Sign in again with `chatapi login` ({exc.redirect_to}).",
                  file=sys.stderr)
            return EXIT_SESSION
        except ApiError as exc:
            print(exc.message, file=sys.stderr)
            return EXIT_FAILED


async def cmd_login(args: argparse.Namespace, settings: ClientSettings) -> int:
    password = args.password or getpass.getpass("Password: ")
    try:
        async with _auth_client(settings) as auth:
            _submitting("Logging in")
            session = await auth.sign_in(args.email, password)
    except AuthError as exc:
        print(exc.message, file=sys.stderr)
        return EXIT_FAILED
    _sessions(settings).save(session)
    print(f"Signed in as {session.email or args.email}")
    return 0


async def cmd_register(args: argparse.Namespace, settings: ClientSettings) -> int:
    password = args.password or getpass.getpass("Password: ")
    confirm = args.password or getpass.getpass("Confirm password: ")
    try:
        async with _auth_client(settings) as auth:
            _submitting("Creating account")
            await auth.sign_up(args.email, password, confirm)
    except AuthError as exc:
        print(exc.message, file=sys.stderr)
        return EXIT_FAILED
    print("Account created. Sign in with `chatapi login`.")
    return 0


async def cmd_logout(args: argparse.Namespace, settings: ClientSettings) -> int:
    sessions = _sessions(settings)
    session = sessions.load()
    if session is None:
        print("Not signed in.")
        return 0
    try:
        async with _auth_client(settings) as auth:
            await auth.sign_out(session)
    except AuthError as exc:
        # the local session is dropped regardless
        print(exc.message, file=sys.stderr)
    sessions.clear()
    print("Signed out.")
    return 0


async def cmd_threads(args: argparse.Namespace, settings: ClientSettings) -> int:
    async def action(chat: ChatClient) -> int:
        print(render_thread_list(await chat.list_threads()))
        return 0
    return await _with_chat(settings, action)


async def cmd_show(args: argparse.Namespace, settings: ClientSettings) -> int:
    async def action(chat: ChatClient) -> int:
        thread = await chat.get_thread(args.thread_id)
        messages = await chat.list_messages(args.thread_id)
        print(render_thread(thread, messages))
        return 0
    return await _with_chat(settings, action)


async def cmd_new(args: argparse.Namespace, settings: ClientSettings) -> int:
    async def action(chat: ChatClient) -> int:
        _submitting("Sending")
        created = await chat.start_thread(args.content, title=args.title)
        thread = created["thread"]
        print(f"Created thread {thread['id']}: {thread['title']}")
        return 0
    return await _with_chat(settings, action)


async def cmd_send(args: argparse.Namespace, settings: ClientSettings) -> int:
    async def action(chat: ChatClient) -> int:
        _submitting("Sending")
        await chat.send_message(args.thread_id, args.content, type=args.type)
        print(render_thread(await chat.get_thread(args.thread_id),
                            await chat.list_messages(args.thread_id)))
        return 0
    return await _with_chat(settings, action)


async def cmd_rename(args: argparse.Namespace, settings: ClientSettings) -> int:
    async def action(chat: ChatClient) -> int:
        _submitting("Saving")
        thread = await chat.rename_thread(args.thread_id, args.title)
        print(f"Renamed thread {thread['id']}: {thread['title']}")
        return 0
    return await _with_chat(settings, action)


async def cmd_delete(args: argparse.Namespace, settings: ClientSettings) -> int:
    async def action(chat: ChatClient) -> int:
        result = await chat.delete_thread(args.thread_id)
        print(f"{result['message']} ({result['deletedId']})")
        return 0
    return await _with_chat(settings, action)


def cmd_serve(args: argparse.Namespace) -> int:  # pragma: no cover
    from chatapi.api.run import main as run_server
    run_server()
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="chatapi",
        description="Chat threads from the command line",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_login = sub.add_parser("login", help="Sign in and cache the session")
    p_login.add_argument("--email", required=True)
    p_login.add_argument("--password", help="Prompted for when omitted")
    p_login.set_defaults(func=cmd_login)

    p_register = sub.add_parser("register", help="Create an account")
    p_register.add_argument("--email", required=True)
    p_register.add_argument("--password", help="Prompted for (twice) when omitted")
    p_register.set_defaults(func=cmd_register)

    p_logout = sub.add_parser("logout", help="Drop the cached session")
    p_logout.set_defaults(func=cmd_logout)

    p_threads = sub.add_parser("threads", help="List conversations")
    p_threads.set_defaults(func=cmd_threads)

    p_show = sub.add_parser("show", help="Print a conversation")
    p_show.add_argument("thread_id", type=int)
    p_show.set_defaults(func=cmd_show)

    p_new = sub.add_parser("new", help="Start a conversation")
    p_new.add_argument("content")
    p_new.add_argument("--title", help="Defaults to the start of the message")
    p_new.set_defaults(func=cmd_new)

    p_send = sub.add_parser("send", help="Add a message to a conversation")
    p_send.add_argument("thread_id", type=int)
    p_send.add_argument("content")
    p_send.add_argument("--type", choices=["user", "bot"], default="user")
    p_send.set_defaults(func=cmd_send)

    p_rename = sub.add_parser("rename", help="Rename a conversation")
    p_rename.add_argument("thread_id", type=int)
    p_rename.add_argument("title")
    p_rename.set_defaults(func=cmd_rename)

    p_delete = sub.add_parser("delete", help="Delete a conversation")
    p_delete.add_argument("thread_id", type=int)
    p_delete.set_defaults(func=cmd_delete)

    p_serve = sub.add_parser("serve", help="Run the API server")
    p_serve.set_defaults(func=None)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    if args.cmd == "serve":
        return cmd_serve(args)
    return asyncio.run(args.func(args, get_client_settings()))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
