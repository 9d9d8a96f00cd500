"""Linda entry point: wires components together and serves the webhook."""

from __future__ import annotations

import asyncio
import json
import signal
import sys
from pathlib import Path

import click

from linda import __version__
from linda.config import Settings, load_settings
from linda.core.activity_log import ActivityLogger
from linda.core.executor import FixFeatureExecutor
from linda.core.llm import create_provider
from linda.core.notifier import Notifier
from linda.core.pipeline import DispatchError, WebhookPipeline
from linda.core.scaffold import AgentScaffoldBuilder
from linda.core.tool_executor import ToolExecutor
from linda.integrations.github import GitHubClient
from linda.integrations.google import GoogleWorkspaceClient
from linda.tools.base import BaseTool
from linda.tools.docs import ReadDocTool
from linda.tools.github_commit import CommitFileTool
from linda.tools.notify import TelegramNotifyTool
from linda.tools.search import WebSearchTool
from linda.tools.sheets import SheetAppendTool
from linda.transports.telegram_transport import TelegramTransport
from linda.utils.logging import get_logger, setup_logging
from linda.webhooks.models import WebhookEnvelope
from linda.webhooks.server import WebhookServer

log = get_logger(__name__)


class Linda:
    """Main application: owns every client and the pipeline built on them."""

    def __init__(self, settings: Settings, dry_run: bool = False) -> None:
        self.settings = settings
        timeout = settings.http_timeout

        # Remote clients
        self.llm = create_provider(settings.llm)
        self.github = GitHubClient(settings.github, timeout=timeout)
        self.google = GoogleWorkspaceClient(settings.google, timeout=timeout)
        self.telegram = TelegramTransport(settings.telegram, timeout=timeout)

        # Tools exposed to the model when the tool loop is on
        self.tools: list[BaseTool] = [
            SheetAppendTool(self.google),
            ReadDocTool(self.google, char_limit=settings.agent.doc_char_limit),
            WebSearchTool(settings.search, timeout=timeout),
            CommitFileTool(settings.github, self.github),
            TelegramNotifyTool(settings.telegram, self.telegram),
        ]
        tool_executor = (
            ToolExecutor(self.llm, self.tools, settings.agent.max_tool_iterations)
            if settings.agent.use_tools
            else None
        )

        self.pipeline = WebhookPipeline(
            activity_log=ActivityLogger(settings.google, self.google),
            executor=FixFeatureExecutor(settings.llm, self.llm, tool_executor),
            builder=AgentScaffoldBuilder(settings.github, self.github),
            notifier=Notifier(settings.telegram, self.telegram),
            dispatch_timeout=settings.agent.dispatch_timeout,
            dry_run=dry_run,
        )
        self.server = WebhookServer(settings.webhook, self.pipeline)

    async def start(self) -> None:
        log.info(
            "linda_starting",
            version=__version__,
            provider=self.settings.llm.provider,
            model=self.settings.llm.model,
        )
        await self.server.start()
        log.info("linda_ready")

    async def stop(self) -> None:
        log.info("linda_stopping")
        await self.server.stop()
        await self.close()
        log.info("linda_stopped")

    async def close(self) -> None:
        await self.llm.close()
        await self.github.close()
        await self.google.close()
        await self.telegram.close()
        for tool in self.tools:
            if hasattr(tool, "cleanup"):
                try:
                    await tool.cleanup()
                except Exception:
                    log.exception("tool_cleanup_error", tool=tool.name)


async def run(settings: Settings, dry_run: bool = False) -> None:
    app = Linda(settings, dry_run=dry_run)

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        log.info("shutdown_signal")
        stop_event.set()

    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _signal_handler)

    await app.start()

    try:
        if sys.platform == "win32":
            while not stop_event.is_set():
                await asyncio.sleep(1)
        else:
            await stop_event.wait()
    except KeyboardInterrupt:
        pass
    finally:
        await app.stop()


async def replay(settings: Settings, envelope: WebhookEnvelope, dry_run: bool = False) -> dict:
    """Run one stored delivery through the pipeline, skipping signature checks."""
    app = Linda(settings, dry_run=dry_run)
    try:
        outcome = await app.pipeline.handle(envelope)
    except DispatchError as e:
        return {"status": "error", "message": str(e)}
    finally:
        await app.close()
    return {
        "status": "ok",
        "action": outcome.action.value,
        "summary": outcome.summary,
        "result": outcome.result,
        "notification": outcome.notification,
    }


def _settings(config_path: str | None, log_level: str | None) -> Settings:
    settings = load_settings(config_path)
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    setup_logging(level=settings.log_level, json_output=settings.log_json)
    return settings


@click.group()
@click.version_option(__version__, prog_name="linda")
def cli() -> None:
    """Linda, the webhook-driven developer assistant."""


@cli.command()
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--dry-run", is_flag=True, help="Classify and log, but skip the LLM and GitHub")
def serve(config_path: str | None, log_level: str | None, dry_run: bool) -> None:
    """Start the webhook server."""
    settings = _settings(config_path, log_level)
    asyncio.run(run(settings, dry_run=dry_run))


@cli.command("replay")
@click.argument("event")
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default="WARNING", help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--dry-run", is_flag=True, help="Classify and log, but skip the LLM and GitHub")
def replay_cmd(
    event: str, payload_file: Path, config_path: str | None, log_level: str, dry_run: bool
) -> None:
    """Run a saved EVENT payload through the pipeline and print the outcome."""
    try:
        payload = json.loads(payload_file.read_text())
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="PAYLOAD_FILE")

    settings = _settings(config_path, log_level)
    envelope = WebhookEnvelope(event_type=event, payload=payload if isinstance(payload, dict) else {})
    outcome = asyncio.run(replay(settings, envelope, dry_run=dry_run))
    click.echo(json.dumps(outcome, indent=2))
    if outcome["status"] != "ok":
        sys.exit(1)


if __name__ == "__main__":
    cli()
