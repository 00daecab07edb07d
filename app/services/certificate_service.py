import os
import re
import random
import string
import uuid
from collections import OrderedDict
from datetime import datetime
from typing import Optional

import pdfkit
from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger

from app.core.config import settings
from app.core.exceptions import CertificatePreconditionError
from app.core.normalizers import normalize_date
from app.schemas.clearance import ClearanceDecision, ClearanceRequest

# -----------------------------
# Setup Jinja2 Environment
# -----------------------------
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
template_dir = os.path.join(BASE_DIR, 'templates', 'pdf')

pdf_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(['html', 'xml'])
)

# Cache the template for performance
try:
    certificate_template = pdf_env.get_template("certificate_template.html")
except Exception as e:
    raise FileNotFoundError(f"PDF template not found in {template_dir}: {e}")

# -----------------------------
# PDF Configuration
# -----------------------------
def _wkhtmltopdf_path() -> str:
    if settings.WKHTMLTOPDF_PATH:
        return settings.WKHTMLTOPDF_PATH
    if os.name == 'nt':  # Windows
        return r"C:\Program Files\wkhtmltopdf\bin\wkhtmltopdf.exe"
    return '/usr/bin/wkhtmltopdf'  # Linux / Docker


pdf_options = {
    'page-size': 'A4',
    'margin-top': '15mm',
    'margin-right': '15mm',
    'margin-bottom': '15mm',
    'margin-left': '15mm',
    'encoding': "UTF-8",
    'no-outline': None,
    'disable-smart-shrinking': None,
}

_pdf_config = None


def get_pdf_config():
    # Built lazily: pdfkit checks for the binary when the configuration is created
    global _pdf_config
    if _pdf_config is None:
        path = _wkhtmltopdf_path()
        if not os.path.exists(path):
            logger.warning(f"wkhtmltopdf not found at {path}. PDF generation will fail.")
        _pdf_config = pdfkit.configuration(wkhtmltopdf=path)
    return _pdf_config


def generate_readable_id() -> str:
    """Generates a format like BDU-CL-2025-XH7B2"""
    year = datetime.now().year
    suffix = ''.join(random.choices(string.ascii_uppercase + string.digits, k=5))
    return f"BDU-CL-{year}-{suffix}"


def format_locale_datetime(value: Optional[str]) -> str:
    parsed = normalize_date(value)
    if parsed is None:
        return value or ""
    return parsed.strftime("%m/%d/%Y, %I:%M:%S %p")


def certificate_filename(student_id: str) -> str:
    safe_id = re.sub(r"[^A-Za-z0-9_-]+", "_", student_id).strip("_") or "student"
    return f"{safe_id}_ClearanceCertificate.pdf"


# -----------------------------
# Artifact
# -----------------------------
class CertificateArtifact:
    """
    One rendered certificate. Preview and download both read from here, so
    the PDF is produced at most once and never re-validated.
    """

    def __init__(self, student_id: str, certificate_number: str, fields: list, html: str):
        self.student_id = student_id
        self.certificate_number = certificate_number
        self.fields = fields
        self.html = html
        self.filename = certificate_filename(student_id)
        self._pdf: Optional[bytes] = None

    def field(self, label: str) -> Optional[str]:
        return dict(self.fields).get(label)

    def to_pdf(self) -> bytes:
        if self._pdf is None:
            try:
                self._pdf = pdfkit.from_string(
                    self.html, False, options=pdf_options, configuration=get_pdf_config()
                )
            except OSError as e:
                raise ValueError(f"PDF generation failed. Ensure wkhtmltopdf is installed. Error: {e}")
        return self._pdf


# -----------------------------
# Rendering
# -----------------------------
def render_certificate(request: ClearanceRequest, decision: ClearanceDecision) -> CertificateArtifact:
    if not decision.approved:
        raise CertificatePreconditionError(
            f"Certificate requested for a '{decision.outcome.value}' decision"
        )
    if decision.student_id != request.student_id:
        raise CertificatePreconditionError("Decision does not belong to this request")

    fields = [
        ("Student Name", request.student_name or ""),
        ("Father's Name", request.father_name or ""),
        ("Grandfather Name", request.grandfather_name or ""),
        ("Sex", request.sex or ""),
        ("Student ID", request.student_id),
        ("Department", request.department or ""),
        ("Academic Year", request.academic_year or ""),
        ("Semester", request.semester or ""),
        ("Year of Study", request.year_of_study or ""),
        ("Reason for Clearance", request.resolved_reason),
        ("Date of Application", format_locale_datetime(request.date)),
    ]
    certificate_number = generate_readable_id()

    html = certificate_template.render({
        "university_name": settings.UNIVERSITY_NAME,
        "title": settings.CERTIFICATE_TITLE,
        "fields": fields,
        "certificate_number": certificate_number,
        "generation_date": datetime.now().strftime("%d-%m-%Y"),
    })

    logger.info(f"Certificate {certificate_number} rendered for {request.student_id}")
    return CertificateArtifact(request.student_id, certificate_number, fields, html)


# -----------------------------
# Ephemeral cache
# -----------------------------
class CertificateCache:
    """Rendered certificates by token, oldest evicted first. Never persisted."""

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size or settings.CERTIFICATE_CACHE_SIZE
        self._items: "OrderedDict[str, CertificateArtifact]" = OrderedDict()

    def put(self, artifact: CertificateArtifact) -> str:
        token = uuid.uuid4().hex
        self._items[token] = artifact
        while len(self._items) > self.max_size:
            self._items.popitem(last=False)
        return token

    def get(self, token: str, student_id: str) -> Optional[CertificateArtifact]:
        artifact = self._items.get(token)
        if artifact is None or artifact.student_id != student_id:
            return None
        return artifact

    def clear(self):
        self._items.clear()


certificate_cache = CertificateCache()
