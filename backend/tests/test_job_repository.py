from ngo_reports.models.job import JobStatus


def test_create_job_starts_pending(jobs):
    job = jobs.create()
    assert job.job_id.startswith("JOB_")
    assert (job.status, job.total, job.processed) == ("pending", 0, 0)
    assert job.error_message is None
    assert job.created_at is not None


def test_create_job_ids_are_unique(jobs):
    assert jobs.create().job_id != jobs.create().job_id


def test_get_unknown_job_returns_none(jobs):
    assert jobs.get("JOB_nope") is None


def test_happy_path_transitions(jobs):
    job_id = jobs.create().job_id
    assert jobs.mark_processing(job_id, total=3)
    assert jobs.record_progress(job_id, 3)
    assert jobs.mark_success(job_id)
    job = jobs.get(job_id)
    assert (job.status, job.total, job.processed) == ("success", 3, 3)


def test_terminal_job_is_never_modified(jobs):
    job_id = jobs.create().job_id
    jobs.mark_processing(job_id, total=5)
    jobs.mark_failed(job_id, "boom")

    assert not jobs.mark_success(job_id)
    assert not jobs.record_progress(job_id, 5)
    assert not jobs.mark_failed(job_id, "second failure")
    job = jobs.get(job_id)
    assert (job.status, job.processed, job.error_message) == ("failed", 0, "boom")


def test_processed_never_goes_backwards(jobs):
    job_id = jobs.create().job_id
    jobs.mark_processing(job_id, total=200)
    jobs.record_progress(job_id, 200)

    assert not jobs.record_progress(job_id, 100)
    assert jobs.get(job_id).processed == 200


def test_success_requires_processing(jobs):
    job_id = jobs.create().job_id
    assert not jobs.mark_success(job_id)
    assert jobs.get(job_id).status == JobStatus.PENDING.value


def test_update_ignores_unknown_fields(jobs):
    job_id = jobs.create().job_id
    assert not jobs.update(job_id, created_at=None, job_id="other")
    assert jobs.get(job_id) is not None


def test_long_failure_message_is_truncated_with_marker(jobs):
    job_id = jobs.create().job_id
    jobs.mark_failed(job_id, "x" * 5000)

    message = jobs.get(job_id).error_message
    assert len(message) == 2000
    assert message.endswith("...")


def test_short_failure_message_is_kept_whole(jobs):
    job_id = jobs.create().job_id
    jobs.mark_failed(job_id, "y" * 2000)
    assert jobs.get(job_id).error_message == "y" * 2000
