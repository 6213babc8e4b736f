"""Step, Task, Job and Pipeline composition.

A ``Step`` does one thing to its input and returns a ``Result``. Tasks
run steps in order, jobs run tasks, and a pipeline runs jobs; each
level stops at the first error and folds warnings from its children
into its own result.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from .context import PipelineContext
from .events import (
    ErrorEvent,
    EventBus,
    JobCompletedEvent,
    JobStartedEvent,
    PipelineCompletedEvent,
    PipelineStartedEvent,
    StepCompletedEvent,
    StepStartedEvent,
)
from .result import Result

T = TypeVar("T")
R = TypeVar("R")


def _combine(results: list[Result[Any]]) -> Result[Any]:
    """Fold child results into one, keeping the last data and all warnings."""
    warnings: list[str] = []
    for result in results:
        warnings.extend(result.warnings or [])
    final = results[-1]
    if final.is_skipped():
        return final
    if warnings:
        return Result.warning(final.data, warnings, final.metadata)
    return Result.success(final.data, final.metadata)


class Step(ABC, Generic[T, R]):
    """Single-responsibility operation from ``T`` to ``R``.

    Subclasses implement ``execute``; callers use ``run``, which
    publishes start/completion events and turns exceptions into
    failure results.
    """

    def __init__(self, name: str, event_bus: EventBus) -> None:
        self.name = name
        self.event_bus = event_bus
        self._logger = logging.getLogger(f"{__name__}.{name}")

    @abstractmethod
    def execute(self, context: PipelineContext, input_data: T) -> Result[R]:
        """Transform ``input_data``; may raise."""

    def run(self, context: PipelineContext, input_data: T) -> Result[R]:
        """Execute the step with events and exception capture."""
        self.event_bus.publish(
            StepStartedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                step_name=self.name,
                step_type=self.__class__.__name__,
            )
        )
        start = time.perf_counter()

        try:
            result = self.execute(context, input_data)
            self._logger.debug(f"Completed step: {self.name} ({result.status.value})")
        except Exception as e:
            self._logger.error(f"Exception in step {self.name}: {e}", exc_info=True)
            result = Result.failure(e, {"step": self.name, "context": context.run_id})
            self.event_bus.publish(
                ErrorEvent(
                    timestamp=time.time(),
                    run_id=context.run_id,
                    context=context,
                    error=e,
                    error_type=type(e).__name__,
                    component=self.name,
                )
            )

        self.event_bus.publish(
            StepCompletedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                step_name=self.name,
                step_type=self.__class__.__name__,
                result=result,
                duration_ms=(time.perf_counter() - start) * 1000,
            )
        )
        return result


class Task(Generic[T, R]):
    """Sequence of steps; each step's data feeds the next.

    A skipped step ends the task early with that skipped result.
    """

    def __init__(self, name: str, steps: list[Step], event_bus: EventBus) -> None:
        self.name = name
        self.steps = steps
        self.event_bus = event_bus
        self._logger = logging.getLogger(f"{__name__}.{name}")

    def execute(self, context: PipelineContext, input_data: T) -> Result[R]:
        current_data: Any = input_data
        step_results: list[Result[Any]] = []

        for i, step in enumerate(self.steps):
            self._logger.debug(f"Executing step {i + 1}/{len(self.steps)}: {step.name}")
            result = step.run(context, current_data)

            if result.is_error():
                self._logger.error(f"Step {step.name} failed, aborting task {self.name}")
                return Result.failure(
                    result.error or RuntimeError(f"Task {self.name} failed at step {step.name}"),
                    {"task": self.name, "failed_step": step.name, "step_index": i, "context": context.run_id},
                )

            step_results.append(result)
            if result.is_skipped():
                break
            if result.data is not None:
                current_data = result.data

        if not step_results:
            return Result.success(current_data)
        return _combine(step_results)

    def add_step(self, step: Step) -> None:
        self.steps.append(step)

    def get_step_count(self) -> int:
        return len(self.steps)


class Job(Generic[T, R]):
    """Sequence of tasks with job-level events."""

    def __init__(self, name: str, tasks: list[Task], event_bus: EventBus) -> None:
        self.name = name
        self.tasks = tasks
        self.event_bus = event_bus
        self._logger = logging.getLogger(f"{__name__}.{name}")

    def _publish_completed(self, context: PipelineContext, result: Result[Any], start: float) -> None:
        self.event_bus.publish(
            JobCompletedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                job_name=self.name,
                job_type=self.__class__.__name__,
                final_result=result,
                duration_ms=(time.perf_counter() - start) * 1000,
            )
        )

    def execute(self, context: PipelineContext, initial_input: Any = None) -> Result[R]:
        """Run every task in order, threading data between them."""
        self.event_bus.publish(
            JobStartedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                job_name=self.name,
                job_type=self.__class__.__name__,
                task_count=len(self.tasks),
            )
        )
        self._logger.debug(f"Starting job: {self.name} with {len(self.tasks)} tasks")
        start = time.perf_counter()

        current_input = initial_input
        task_results: list[Result[Any]] = []

        for i, task in enumerate(self.tasks):
            result = task.execute(context, current_input)

            if result.is_error():
                self._logger.error(f"Task {task.name} failed, aborting job {self.name}")
                self._publish_completed(context, result, start)
                return Result.failure(
                    result.error or RuntimeError(f"Job {self.name} failed at task {task.name}"),
                    {"job": self.name, "failed_task": task.name, "task_index": i, "context": context.run_id},
                )

            task_results.append(result)
            if result.is_skipped():
                break
            if result.data is not None:
                current_input = result.data

        final = _combine(task_results) if task_results else Result.success(current_input)
        self._publish_completed(context, final, start)
        return final

    def add_task(self, task: Task) -> None:
        self.tasks.append(task)


class Pipeline(Generic[T, R]):
    """Top-level sequence of jobs for one source file."""

    def __init__(self, name: str, jobs: list[Job], event_bus: EventBus) -> None:
        self.name = name
        self.jobs = jobs
        self.event_bus = event_bus
        self._logger = logging.getLogger(f"{__name__}.{name}")

    def _publish_completed(self, context: PipelineContext, result: Result[Any], start: float) -> None:
        self.event_bus.publish(
            PipelineCompletedEvent(
                timestamp=time.time(),
                run_id=context.run_id,
                context=context,
                final_result=result,
                duration_ms=(time.perf_counter() - start) * 1000,
            )
        )

    def execute(self, context: PipelineContext, initial_input: Any = None) -> Result[R]:
        """Run the jobs in order; the first failure or skip ends the run."""
        self.event_bus.publish(PipelineStartedEvent(timestamp=time.time(), run_id=context.run_id, context=context))
        start = time.perf_counter()
        self._logger.info(f"Starting pipeline: {self.name} with {len(self.jobs)} jobs")

        current_input = initial_input
        job_results: list[Result[Any]] = []

        for i, job in enumerate(self.jobs):
            result = job.execute(context, current_input)

            if result.is_error():
                self._logger.error(f"Job {job.name} failed, aborting pipeline {self.name}")
                self._publish_completed(context, result, start)
                return Result.failure(
                    result.error or RuntimeError(f"Pipeline {self.name} failed at job {job.name}"),
                    {"pipeline": self.name, "failed_job": job.name, "job_index": i, "context": context.run_id},
                )

            job_results.append(result)
            if result.is_skipped():
                break
            if result.data is not None:
                current_input = result.data

        final = _combine(job_results) if job_results else Result.success(current_input)
        self._publish_completed(context, final, start)
        return final

    def add_job(self, job: Job) -> None:
        self.jobs.append(job)

    def get_job_count(self) -> int:
        return len(self.jobs)
