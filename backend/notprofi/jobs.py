import logging
import time

from flask import current_app

from .accounting import format_job_number
from .extensions import db
from .models import Job, JobReport

logger = logging.getLogger(__name__)


def next_job_number() -> str:
    prefix = current_app.config.get('JOB_NUMBER_PREFIX', 'NP24')
    stamp = int(time.time() * 1000)
    number = format_job_number(stamp, prefix)
    while db.session.execute(db.select(Job.id).where(Job.job_number == number)).first():
        stamp += 1
        number = format_job_number(stamp, prefix)
    return number


def create_job(fields: dict) -> Job:
    job = Job(job_number=next_job_number(), **fields)
    db.session.add(job)
    db.session.commit()
    logger.info("Created job %s", job.job_number)
    return job


def update_job(job: Job, fields: dict) -> Job:
    for attr, value in fields.items():
        setattr(job, attr, value)
    db.session.commit()
    return job


def create_or_update_job_report(job: Job, fields: dict) -> JobReport:
    report = db.session.execute(
        db.select(JobReport).filter_by(job_id=job.id)
    ).scalar_one_or_none()
    if report is None:
        report = JobReport(job_id=job.id)
        db.session.add(report)
    for attr, value in fields.items():
        setattr(report, attr, value)
    db.session.commit()
    return report
