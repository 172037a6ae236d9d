"""
FastAPI app: read-only view of what the revoker would remove.

Every request runs a dry run against AWS; nothing is revoked from here.
Run with: uvicorn sg_revoker.main:app
"""

from io import BytesIO

from botocore.exceptions import BotoCoreError
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response
from openpyxl import Workbook

from sg_revoker.config import Settings, load_settings
from sg_revoker.regions import get_regions
from sg_revoker.revoker import RunReport, revoke_all_regions


app = FastAPI(title="Default SG Revoker", version="0.1.0")


def _settings() -> Settings:
    try:
        return load_settings()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=f"Configuration error: {e}") from e


def get_dry_run_report(regions: list[str] | None = None) -> RunReport:
    settings = _settings()
    try:
        session = settings.session()
    except BotoCoreError as e:
        raise HTTPException(status_code=500, detail=f"Configuration error: {e}") from e
    return revoke_all_regions(
        regions=regions or settings.regions,
        dry_run=True,
        session=session,
        fail_fast=False,
    )


def _requested_regions(region: list[str] | None) -> list[str] | None:
    if not region:
        return None
    try:
        return get_regions(region)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.get("/")
def root():
    return {
        "service": "sg-revoker",
        "regions": "/api/regions",
        "default_sg_rules": "/api/default-sg-rules",
        "export": "/api/default-sg-rules/export",
    }


@app.get("/api/regions")
def list_regions():
    return {"regions": _settings().regions}


@app.get("/api/default-sg-rules")
def api_default_sg_rules(region: list[str] | None = Query(default=None)):
    """JSON dry-run report: default groups and the rules that would be revoked."""
    return get_dry_run_report(_requested_regions(region)).to_dict()


@app.get("/api/default-sg-rules/export")
def api_default_sg_rules_export(region: list[str] | None = Query(default=None)):
    """Download the rules that would be revoked as an Excel file."""
    report = get_dry_run_report(_requested_regions(region))
    wb = Workbook()
    ws = wb.active
    ws.title = "Default SG rules"
    ws.append(["Region", "Group ID", "Rule ID", "Direction", "Protocol", "From", "To", "Source/Destination"])
    for result in report.results:
        for rule in result.rules:
            ws.append([
                rule.region,
                rule.group_id,
                rule.rule_id,
                rule.direction,
                rule.ip_protocol,
                rule.from_port,
                rule.to_port,
                rule.cidr,
            ])

    errors = [r for r in report.results if r.error]
    if errors:
        ws_err = wb.create_sheet("Errors")
        ws_err.append(["Region", "Error"])
        for r in errors:
            ws_err.append([r.region, r.error])

    buf = BytesIO()
    wb.save(buf)
    buf.seek(0)
    return Response(
        content=buf.getvalue(),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=default-sg-rules.xlsx"},
    )
