from splurge_cypress_to_playwright.context import PipelineContext
from splurge_cypress_to_playwright.events import ErrorEvent, EventBus, StepCompletedEvent
from splurge_cypress_to_playwright.pipeline import Job, Pipeline, Step, Task
from splurge_cypress_to_playwright.result import Result


class DummyEventBus:
    def __init__(self):
        self.published = []

    def publish(self, event):
        self.published.append(event)


class AddOneStep(Step):
    def execute(self, context: PipelineContext, input_data: int) -> Result[int]:
        return Result.success(input_data + 1)


class FailStep(Step):
    def execute(self, context: PipelineContext, input_data: int) -> Result[int]:
        return Result.failure(RuntimeError("boom"))


class ExceptionStep(Step):
    """Step that raises an exception during execution."""

    def execute(self, context: PipelineContext, input_data: int) -> Result[int]:
        raise RuntimeError("Test exception in step")


class WarningStep(Step):
    """Step that returns a warning result."""

    def execute(self, context: PipelineContext, input_data: int) -> Result[int]:
        return Result.warning(input_data + 1, ["Test warning"])


class SkipStep(Step):
    """Step that decides there is nothing to do."""

    def execute(self, context: PipelineContext, input_data: int) -> Result[int]:
        return Result.skipped("nothing to migrate", {"changed": False})


def make_context(tmp_path):
    spec = tmp_path / "s.cy.ts"
    spec.write_text("cy.visit('/');\n")
    return PipelineContext.create(source_file=str(spec), target_file=None, config=None, run_id="test")


def test_task_happy_path(tmp_path):
    eb = DummyEventBus()
    task = Task("t", [AddOneStep("s1", eb), AddOneStep("s2", eb)], eb)
    res = task.execute(make_context(tmp_path), 0)
    assert res.is_success()
    assert res.data == 2
    assert task.get_step_count() == 2


def test_task_failure_short_circuits(tmp_path):
    eb = DummyEventBus()
    ok = AddOneStep("ok", eb)
    t = Task("t2", [ok, FailStep("bad", eb), ok], eb)
    res = t.execute(make_context(tmp_path), 0)
    assert res.is_error()
    assert res.metadata["failed_step"] == "bad"
    assert res.metadata["step_index"] == 1


def test_step_execution_error_handling(tmp_path):
    """Exceptions raised by a step become failure results."""
    eb = DummyEventBus()
    context = make_context(tmp_path)

    result = ExceptionStep("failing_step", eb).run(context, 5)

    assert result.is_error()
    assert "Test exception in step" in str(result.error)
    assert result.metadata["step"] == "failing_step"
    assert result.metadata["context"] == context.run_id
    # start, error and completion events
    assert len(eb.published) == 3
    error_event = eb.published[1]
    assert isinstance(error_event, ErrorEvent)
    assert error_event.component == "failing_step"
    assert error_event.error_type == "RuntimeError"


def test_step_run_publishes_completion_with_result(tmp_path):
    bus = EventBus()
    completed = []
    bus.subscribe(StepCompletedEvent, completed.append)

    AddOneStep("add", bus).run(make_context(tmp_path), 1)

    assert len(completed) == 1
    assert completed[0].step_name == "add"
    assert completed[0].result.data == 2


def test_task_with_warning_steps(tmp_path):
    """Warnings are carried to the end of the task."""
    eb = DummyEventBus()
    task = Task("test_task", [AddOneStep("a", eb), WarningStep("w", eb), AddOneStep("b", eb)], eb)

    result = task.execute(make_context(tmp_path), 0)

    assert result.is_warning()
    assert result.data == 3
    assert result.warnings == ["Test warning"]


def test_skipped_step_ends_task(tmp_path):
    eb = DummyEventBus()
    task = Task("test_task", [AddOneStep("a", eb), SkipStep("skip", eb), AddOneStep("b", eb)], eb)

    result = task.execute(make_context(tmp_path), 0)

    assert result.is_skipped()
    assert result.reason == "nothing to migrate"


def test_job_threading(tmp_path):
    eb = DummyEventBus()
    job = Job("j", [Task("t", [AddOneStep("s", eb)], eb), Task("u", [AddOneStep("s", eb)], eb)], eb)
    res = job.execute(make_context(tmp_path), 3)
    assert res.is_success()
    assert res.data == 5


def test_job_with_failing_task(tmp_path):
    """Test job execution when a task fails."""
    eb = DummyEventBus()
    failing_task = Task("failing_task", [ExceptionStep("bad", eb)], eb)
    good_task = Task("good_task", [AddOneStep("good", eb)], eb)
    job = Job("test_job", [failing_task, good_task], eb)

    result = job.execute(make_context(tmp_path), 5)

    assert result.is_error()
    assert result.metadata["job"] == "test_job"
    assert result.metadata["failed_task"] == "failing_task"
    assert result.metadata["task_index"] == 0


def test_pipeline_stops_after_skipped_job(tmp_path):
    eb = DummyEventBus()
    skip_job = Job("collector", [Task("t", [SkipStep("skip", eb)], eb)], eb)
    never_job = Job("output", [Task("t", [FailStep("never", eb)], eb)], eb)
    pipeline = Pipeline("migration", [skip_job, never_job], eb)

    result = pipeline.execute(make_context(tmp_path), 0)

    assert result.is_skipped()
    assert result.metadata["changed"] is False
    assert pipeline.get_job_count() == 2


def test_pipeline_failure_names_job(tmp_path):
    eb = DummyEventBus()
    collector = Job("collector", [Task("t", [AddOneStep("a", eb)], eb)], eb)
    output = Job("output", [Task("t", [FailStep("f", eb)], eb)], eb)
    pipeline = Pipeline("migration", [collector, output], eb)

    result = pipeline.execute(make_context(tmp_path), 0)

    assert result.is_error()
    assert result.metadata["failed_job"] == "output"
    assert result.metadata["job_index"] == 1
