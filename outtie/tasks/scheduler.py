# outtie/tasks/scheduler.py
from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from outtie.tasks.token_cleanup import run_token_cleanup_job


def start_scheduler(app):
    """
    - Runs jobs inside an app context.
    - Skips the parent process of the debug reloader so jobs run once.
    - Shuts the scheduler down when the process exits.
    """
    if not app.config.get("SCHEDULER_ENABLED", True):
        app.logger.info("[scheduler] disabled by config.")
        return None

    # the werkzeug reloader's real worker process has WERKZEUG_RUN_MAIN=true
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    scheduler = BackgroundScheduler(timezone="UTC")
    minutes = app.config.get("TOKEN_CLEANUP_INTERVAL_MINUTES", 60)

    def _job_wrapper():
        try:
            run_token_cleanup_job(app)
        except Exception as ex:
            app.logger.exception(f"[scheduler] token_cleanup_job error: {ex}")

    scheduler.add_job(
        func=_job_wrapper,
        trigger=IntervalTrigger(minutes=minutes),
        id="token_cleanup_job",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=120,
    )

    scheduler.start()
    app.logger.info(f"[scheduler] Token cleanup job started (every {minutes} minutes).")

    app.extensions["apscheduler"] = scheduler
    atexit.register(lambda: scheduler.shutdown(wait=False) if scheduler.running else None)
    return scheduler
