import asyncio
import logging
from typing import List

from config.settings import settings, configure_logging
from src.analyzers.utils import format_currency, format_interval, get_quote_summary
from src.data.models import RenderPayload
from src.engine.session import TrackerSession
from src.integrations.notifier import LogNotifier, WebhookNotifier
from src.services.acquisition import QuoteAcquisitionLayer
from src.services.alerts import AlertEvaluator
from src.utils.database import DatabaseManager

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
• <TICKER>                   look up a ticker (e.g. 'AAPL', 'DEMO')
• project <pct> [rise|drop]  projected price for a percentage move
• alert <rise|drop> <pct>    alert when the price moves by pct (max 50)
• remove <id>                remove an alert
• refresh                    toggle auto-refresh
• interval <seconds>         set the base refresh interval
• hide / show                simulate the page being hidden or shown
• help, quit"""


class ConsoleRenderer:
    """Prints engine payloads as plain text."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose
        self.last_payload = None

    def render(self, payload: RenderPayload) -> None:
        self.last_payload = payload
        if not self.verbose:
            return
        for line in self.format(payload):
            print(line)

    def format(self, payload: RenderPayload) -> List[str]:
        lines = [f"[{payload.phase.label}] {payload.phase.next_boundary_description}"]
        if payload.message:
            lines.append(f"⚠️  {payload.message}")
        if payload.quote is not None:
            lines.append(f"Data: {payload.provenance}")
            lines.append(get_quote_summary(payload.quote))
        if payload.projection is not None:
            p = payload.projection
            sign = "-" if p.direction.value == "drop" else "+"
            lines.append(f"Projection {sign}{p.percentage:g}%: {format_currency(p.projected_price)} "
                         f"({'+' if p.delta >= 0 else ''}{format_currency(p.delta)})")
        if payload.alerts:
            lines.append("Alerts:")
            lines.extend(f"  #{rule.id} {rule.describe()}" for rule in payload.alerts)
        if payload.refresh_enabled:
            lines.append(f"Auto-refresh: ON (every {format_interval(payload.effective_interval_seconds)})")
        return lines


def create_tracker_session(renderer: ConsoleRenderer = None, database: DatabaseManager = None) -> TrackerSession:
    notifier = WebhookNotifier(settings.alert_webhook_url) if settings.alert_webhook_url else LogNotifier()
    acquisition = QuoteAcquisitionLayer(store=database, config=settings)
    return TrackerSession(
        acquisition=acquisition,
        evaluator=AlertEvaluator(notifier),
        config=settings,
        renderer=renderer or ConsoleRenderer(),
    )


async def handle_command(session: TrackerSession, user_input: str) -> bool:
    """Dispatch one console command. Returns False when the user quits."""
    parts = user_input.strip().split()
    if not parts:
        return True

    command = parts[0].lower()
    if command in ["q", "quit", "exit"]:
        return False
    if command == "help":
        print(HELP_TEXT)
    elif command == "project" and len(parts) >= 2:
        session.set_projection(parts[1], parts[2].lower() if len(parts) > 2 else "rise")
    elif command == "alert" and len(parts) == 3:
        session.add_alert(parts[1].lower(), parts[2])
    elif command == "remove" and len(parts) == 2 and parts[1].isdigit():
        session.remove_alert(int(parts[1]))
    elif command == "refresh":
        session.toggle_refresh()
    elif command == "interval" and len(parts) == 2 and parts[1].isdigit():
        session.set_refresh_interval(int(parts[1]))
    elif command == "hide":
        session.on_visibility_change(hidden=True)
    elif command == "show":
        session.on_visibility_change(hidden=False)
    else:
        await session.search(parts[0])
    return True


async def run_tracker_console():
    configure_logging()

    database = DatabaseManager()
    await database.create_tables()

    session = create_tracker_session(database=database)
    await session.acquisition.initialize()

    try:
        print("📈 Stock Tracker Ready!")
        print(HELP_TEXT + "\n")

        while True:
            try:
                user_input = await asyncio.to_thread(input, "User: ")
                if not await handle_command(session, user_input):
                    print("Exiting...")
                    break
            except (KeyboardInterrupt, EOFError):
                print("\nExiting...")
                break
    finally:
        session.stop_refresh()
        await database.close()


def main():
    asyncio.run(run_tracker_console())


if __name__ == "__main__":
    main()
