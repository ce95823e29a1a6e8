"""Compose, preview and send a message from the command line."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Annotated, Optional

import typer
from box import Box

from mailwright.cli.common import console, exit_error
from mailwright.config import MailwrightError, get_config, load_config
from mailwright.logging import init_logging
from mailwright.mail import TEXT_PLAIN, MailSession, MessageBuilder, SMTPCredentials

# ─────────────────────────────────────────────────────────────────────────────
# Shared options
# ─────────────────────────────────────────────────────────────────────────────

SenderOption = Annotated[str, typer.Option("--from", "-f", help="Sender address.")]
ToOption = Annotated[Optional[list[str]], typer.Option("--to", "-t", help="TO recipient (repeatable).")]
CcOption = Annotated[Optional[list[str]], typer.Option("--cc", help="CC recipient (repeatable).")]
BccOption = Annotated[Optional[list[str]], typer.Option("--bcc", help="BCC recipient (repeatable).")]
ReplyToOption = Annotated[Optional[list[str]], typer.Option("--reply-to", help="Reply-To address (repeatable).")]
SubjectOption = Annotated[Optional[str], typer.Option("--subject", "-s", help="Subject line.")]
BodyOption = Annotated[Optional[str], typer.Option("--body", "-b", help="Message body.")]
BodyFileOption = Annotated[
    Optional[Path],
    typer.Option("--body-file", exists=True, dir_okay=False, readable=True, help="Read the body from a file."),
]
ContentTypeOption = Annotated[str, typer.Option("--content-type", help="Body content type.")]
CharsetOption = Annotated[Optional[str], typer.Option("--charset", help="Charset for text content.")]
HeaderOption = Annotated[
    Optional[list[str]],
    typer.Option("--header", "-H", help="Custom header as 'Name: value' (repeatable)."),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Configuration file merged over the defaults."),
]


def _split_header(raw: str) -> tuple[str, str]:
    """Split ``Name: value`` into its parts.

    Examples:
        >>> _split_header("X-Custom-Header: Value")
        ('X-Custom-Header', 'Value')
    """
    name, sep, value = raw.partition(":")
    if not sep:
        exit_error(f"Header must look like 'Name: value', got {raw!r}")
    return name.strip(), value.strip()


def _load(config_path: Path | None) -> Box:
    return load_config(path=config_path) if config_path is not None else get_config()


def _compose(
    builder: MessageBuilder,
    *,
    sender: str,
    to: list[str] | None,
    cc: list[str] | None,
    bcc: list[str] | None,
    reply_to: list[str] | None,
    subject: str | None,
    body: str | None,
    body_file: Path | None,
    content_type: str,
    headers: list[str] | None,
) -> MessageBuilder:
    """Apply command line fields to ``builder``."""
    builder.set_from(sender)
    if to:
        builder.add_to(*to)
    if cc:
        builder.add_cc(*cc)
    if bcc:
        builder.add_bcc(*bcc)
    if reply_to:
        builder.add_reply_to(*reply_to)
    if subject is not None:
        builder.set_subject(subject)
    for raw in headers or []:
        builder.add_header(*_split_header(raw))

    if body is not None and body_file is not None:
        exit_error("Use either --body or --body-file, not both")
    if body_file is not None:
        body = body_file.read_text(encoding="utf-8")
    if body is not None:
        builder.set_content(body, content_type)
    return builder


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────


def preview(
    sender: SenderOption,
    to: ToOption = None,
    cc: CcOption = None,
    bcc: BccOption = None,
    reply_to: ReplyToOption = None,
    subject: SubjectOption = None,
    body: BodyOption = None,
    body_file: BodyFileOption = None,
    content_type: ContentTypeOption = TEXT_PLAIN,
    charset: CharsetOption = None,
    header: HeaderOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Build the message and print its RFC 2822 form without sending it."""
    try:
        config = _load(config_path)
        builder = MessageBuilder(charset=charset or config.mail.get("charset"))
        _compose(
            builder,
            sender=sender,
            to=to,
            cc=cc,
            bcc=bcc,
            reply_to=reply_to,
            subject=subject,
            body=body,
            body_file=body_file,
            content_type=content_type,
            headers=header,
        )
        rendered = builder.build().to_mime().as_string()
    except MailwrightError as exc:
        exit_error(str(exc))

    console.print(rendered, markup=False, highlight=False, soft_wrap=True)


def send(
    sender: SenderOption,
    to: ToOption = None,
    cc: CcOption = None,
    bcc: BccOption = None,
    reply_to: ReplyToOption = None,
    subject: SubjectOption = None,
    body: BodyOption = None,
    body_file: BodyFileOption = None,
    content_type: ContentTypeOption = TEXT_PLAIN,
    charset: CharsetOption = None,
    header: HeaderOption = None,
    host: Annotated[Optional[str], typer.Option("--host", help="SMTP host (overrides configuration).")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="SMTP port.")] = None,
    username: Annotated[Optional[str], typer.Option("--username", "-u", help="SMTP login.")] = None,
    password: Annotated[
        Optional[str],
        typer.Option("--password", envvar="MAILWRIGHT_SMTP_PASSWORD", help="SMTP password."),
    ] = None,
    use_ssl: Annotated[Optional[bool], typer.Option("--ssl/--no-ssl", help="Connect with implicit TLS.")] = None,
    use_starttls: Annotated[
        Optional[bool], typer.Option("--starttls/--no-starttls", help="Upgrade with STARTTLS.")
    ] = None,
    trace: Annotated[bool, typer.Option("--trace", help="Log the SMTP dialogue.")] = False,
    config_path: ConfigOption = None,
) -> None:
    """Build the message and deliver it over SMTP.

    Exit codes: 0 (sent), 1 (invalid input, configuration or delivery error).
    """
    init_logging(config={"output": "console", "console": {"level": "TRACE" if trace else "WARNING"}})

    try:
        config = _load(config_path)
        session = MailSession.from_config(config)

        overrides: dict[str, object] = {}
        if host:
            overrides["host"] = host
        if port is not None:
            overrides["port"] = port
        if username:
            overrides["credentials"] = SMTPCredentials(username=username, password=password or "")
        if use_ssl is not None or use_starttls is not None:
            overrides["security"] = replace(
                session.security,
                use_ssl=session.security.use_ssl if use_ssl is None else use_ssl,
                use_starttls=session.security.use_starttls if use_starttls is None else use_starttls,
            )
        if overrides:
            session = replace(session, **overrides)

        builder = MessageBuilder(session=session, charset=charset or config.mail.get("charset"))
        _compose(
            builder,
            sender=sender,
            to=to,
            cc=cc,
            bcc=bcc,
            reply_to=reply_to,
            subject=subject,
            body=body,
            body_file=body_file,
            content_type=content_type,
            headers=header,
        )
        message_id = builder.send()
    except MailwrightError as exc:
        exit_error(str(exc))

    console.print(f"[green]✓[/] Message sent: {message_id}", highlight=False)


__all__ = ["preview", "send"]
