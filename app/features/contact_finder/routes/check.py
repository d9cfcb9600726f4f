from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool

from app.features.contact_finder.dependencies.crawl import get_job_registry, get_streaming_reporter
from app.features.contact_finder.schemas.crawl import CancelRequest, CheckRequest
from app.features.contact_finder.services.job_registry import JobRegistry
from app.features.contact_finder.services.streaming import StreamingReporter
from app.platform.logger import get_logger
from app.platform.response import api_response, ndjson_response

logger = get_logger(__name__)

router = APIRouter(tags=["Contact Finder"])


@router.post(
    "/check",
    status_code=status.HTTP_200_OK,
    summary="Find contact emails for a batch of domains",
    description="""
    Crawl each domain in order and stream one JSON record per site as soon as
    it is finished (`application/x-ndjson`). The connection closes when the
    batch completes or the job is cancelled via `/cancel`.

    **Record:**
    ```json
    {
        "site": "https://b.com",
        "links": ["https://b.com/contact"],
        "emails": ["hi@b.com", "sales@b.com"],
        "stats": {
            "totalLinks": 12,
            "contactLinks": 1,
            "mainPageEmails": 1,
            "contactPageEmails": 1,
            "totalEmails": 2,
            "failedLinks": 0,
            "method": "dynamic"
        }
    }
    ```
    Failed sites carry `error`, empty lists and `"stats": null`.
    """,
)
async def check_domains(
    request: CheckRequest,
    registry: JobRegistry = Depends(get_job_registry),
    reporter: StreamingReporter = Depends(get_streaming_reporter),
):
    # Registering before the stream starts turns a duplicate id into a 409.
    registry.register(request.job_id)
    logger.info(f"[{request.job_id}] Accepted batch of {len(request.domains)} domain(s)")
    return ndjson_response(reporter.stream(request.job_id, request.domains))


@router.post("/cancel", status_code=status.HTTP_200_OK, summary="Cancel a running batch")
async def cancel_job(
    request: CancelRequest,
    registry: JobRegistry = Depends(get_job_registry),
):
    # Closing the browser blocks, keep it off the event loop.
    await run_in_threadpool(registry.cancel, request.job_id)
    return api_response(
        data={"jobId": request.job_id},
        message="Job cancelled",
        status_code=status.HTTP_200_OK,
    )
