"""CLI entry point — python -m trendbot."""

import argparse
import sys

from .config import Settings, get_telegram_token
from .log import log, set_verbose


def build_job(settings: Settings):
    from .deliver import TelegramNotifier
    from .generate import TweetGenerator
    from .job import TrendingJob
    from .topics import TopicEngine

    engine = TopicEngine.from_settings(settings)
    generator = TweetGenerator(model=settings.model)
    notifier = TelegramNotifier()
    return TrendingJob(engine, generator, notifier, settings)


def cmd_trends(args, settings: Settings):
    from .topics import TopicEngine

    engine = TopicEngine.from_settings(settings)
    trends = engine.get_all_trends()

    if not trends:
        print("  No trends found from enabled sources.")
        return 1

    print(f"\n  Trending topics ({len(trends)} found):\n")
    for i, t in enumerate(trends[:args.limit], 1):
        score = f" [{t.score:.0f}]" if t.engagement else ""
        print(f"  {i:2d}. [{t.source}/{t.category}] {t.title}{score}")
        if t.description:
            print(f"      {t.description[:100]}")
    return 0


def cmd_run(args, settings: Settings):
    if args.dry_run:
        settings.pacing_delay = 0
    job = build_job(settings)
    if args.dry_run:
        job.notifier.client.token = ""
    summary = job.execute()
    print(f"\n  Trends: {summary.trends}  New: {summary.novel}  "
          f"Sent: {summary.processed}  Failed: {summary.failed}")
    return 0 if summary.trends else 1


def cmd_serve(args, settings: Settings):
    from .bot import TrendBot
    from .scheduler import Scheduler

    if args.at:
        settings.schedule_at = args.at
    if args.every:
        settings.interval_minutes = args.every

    job = build_job(settings)
    scheduler = Scheduler(job, settings)

    bot = None
    if get_telegram_token():
        notifier = job.notifier
        bot = TrendBot(notifier.client, job.engine, job.generator,
                       notifier.subscribers, scheduler=scheduler)
        log("Telegram bot polling enabled")
    else:
        log("TELEGRAM_BOT_TOKEN not set — running scheduler only")

    if args.now:
        scheduler.trigger()

    try:
        scheduler.run_forever(bot)
    except KeyboardInterrupt:
        log("Shutting down")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Trend Tweet Bot — trending topics to tweet suggestions on Telegram",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd")

    p_trends = sub.add_parser("trends", help="Fetch and print the merged trend set")
    p_trends.add_argument("--limit", type=int, default=15, help="Max topics to show")

    p_run = sub.add_parser("run", help="Run the pipeline once")
    p_run.add_argument("--dry-run", action="store_true", help="Don't send to Telegram, no pacing")

    p_serve = sub.add_parser("serve", help="Run on a schedule and answer bot commands")
    p_serve.add_argument("--at", default=None, help="Daily run time, HH:MM")
    p_serve.add_argument("--every", type=int, default=None, help="Also run every N minutes")
    p_serve.add_argument("--now", action="store_true", help="Run once immediately on start")

    args = parser.parse_args(argv)

    if args.verbose:
        set_verbose(True)

    if not args.cmd:
        parser.print_help()
        return 0

    settings = Settings.from_config()
    handlers = {"trends": cmd_trends, "run": cmd_run, "serve": cmd_serve}
    return handlers[args.cmd](args, settings)


if __name__ == "__main__":
    sys.exit(main())
