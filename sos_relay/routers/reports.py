"""Reports router: POST /api/submit (public), GET /api/reports and POST /api/acknowledge (operator)."""
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from sos_relay.dependencies import get_intake
from sos_relay.models.report import AcknowledgeRequest, ReportOut, SubmitResponse
from sos_relay.pipelines.intake import IntakeService
from sos_relay.services.object_storage import IncomingFile

router = APIRouter(prefix="/api", tags=["reports"])


@router.post("/submit", response_model=SubmitResponse, status_code=201)
async def submit_report(request: Request, intake: IntakeService = Depends(get_intake)):
    """Public distress submission: multipart form fields plus any number of file parts."""
    form = await request.form()
    fields: dict[str, str] = {}
    files: list[IncomingFile] = []
    try:
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files.append(IncomingFile(
                    filename=value.filename or "",
                    content_type=value.content_type or "",
                    file=value.file,
                ))
            else:
                fields[key] = value
        report_id = await intake.submit(fields, files)
    finally:
        await form.close()
    return SubmitResponse(report_id=report_id)


@router.get("/reports", response_model=list[ReportOut])
async def list_reports(intake: IntakeService = Depends(get_intake)):
    """Operator listing, newest first."""
    return await intake.list_reports()


@router.get("/reports/{report_id}", response_model=ReportOut)
async def get_report(report_id: str, intake: IntakeService = Depends(get_intake)):
    return await intake.get_report(report_id)


@router.post("/acknowledge", response_model=ReportOut)
async def acknowledge_report(body: AcknowledgeRequest, intake: IntakeService = Depends(get_intake)):
    """Operator marks a report as acknowledged."""
    return await intake.acknowledge(body.report_id, body.operator_id)
