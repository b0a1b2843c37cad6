"""Grading orchestrator: setup, build, run, then interpret the results."""

import logging
from dataclasses import dataclass

from junit_grade_action import runner
from junit_grade_action.assembler import assemble_report
from junit_grade_action.grading import interpret_run
from junit_grade_action.models.config import GraderConfig
from junit_grade_action.models.outcome import ExecutionError
from junit_grade_action.models.report import GradingReport

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class GradingOrchestrator:
    """Runs one grading attempt and always produces exactly one report."""

    config: GraderConfig

    async def grade(self) -> GradingReport:
        """Grade the submission in the current working directory.

        Unexpected exceptions are converted to an error report.
        """
        try:
            return await self._grade()
        except Exception as exc:
            log.error("Grading failed unexpectedly: %s", exc, exc_info=exc)
            return assemble_report(
                self.config,
                ExecutionError(
                    stage="run",
                    reason=f"Unexpected error: {exc}",
                    command=self.config.run_command,
                ),
            )

    async def _grade(self) -> GradingReport:
        config = self.config
        timeout = config.timeout_seconds

        if config.setup_command:
            try:
                await runner.run_setup(config.setup_command, timeout)
            except runner.ExternalToolUnavailableError as exc:
                log.error("Error running setup command: %s", exc)
                return assemble_report(
                    config,
                    ExecutionError(
                        stage="setup", reason=str(exc), command=config.setup_command
                    ),
                )

        build = await runner.run_command(config.build_command, timeout)
        if not build.succeeded:
            log.error("Error building Java code (exit code %s)", build.returncode)
            return assemble_report(
                config,
                ExecutionError(
                    stage="build",
                    reason=self._failure_reason(build),
                    command=build.command,
                    stdout=build.stdout,
                    stderr=build.stderr,
                ),
            )

        tests = await runner.run_command(config.run_command, timeout)
        if tests.timed_out or tests.returncode is None:
            log.error("Test run did not finish")
            return assemble_report(
                config,
                ExecutionError(
                    stage="run",
                    reason=self._failure_reason(tests),
                    command=tests.command,
                    stdout=tests.stdout,
                    stderr=tests.stderr,
                ),
            )

        return interpret_run(
            config,
            returncode=tests.returncode,
            stdout=tests.stdout,
            stderr=tests.stderr,
        )

    def _failure_reason(self, result: runner.CommandResult) -> str:
        if result.timed_out:
            return f"Timed out after {self.config.timeout_minutes:g} minute(s)"
        return f"Command exited with code {result.returncode}"
