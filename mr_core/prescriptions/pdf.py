# mr_core/prescriptions/pdf.py
from __future__ import annotations

import io
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from django.core.files.base import ContentFile
from django.core.files.storage import FileSystemStorage
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from mr_core.diagnostics.models import Diagnostic, DiagnosticState
from mr_core.documents.staging import PRESCRIPTIONS_DIR
from mr_core.integrations.registry import get_integrations
from mr_core.prescriptions.models import Prescription
from mr_core.prescriptions.services import pick_linked_diagnostic

logger = logging.getLogger(__name__)

NA = "N/A"
MARGIN = 50
PAGE_WIDTH, PAGE_HEIGHT = A4
TEXT_WIDTH = PAGE_WIDTH - 2 * MARGIN


@dataclass(frozen=True)
class RenderedPdf:
    filename: str
    path: str
    content: bytes


def calculate_age(birth, today: Optional[date] = None) -> Optional[int]:
    if not birth:
        return None
    if isinstance(birth, datetime):
        born = birth.date()
    elif isinstance(birth, date):
        born = birth
    else:
        raw = str(birth)
        parsed = parse_datetime(raw)
        born = parsed.date() if parsed else parse_date(raw[:10])
        if born is None:
            return None

    today = today or timezone.localdate()
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


def full_name(data: Optional[dict]) -> str:
    if not data:
        return NA
    user = data.get("user") if isinstance(data.get("user"), dict) else {}
    name = data.get("fullName") or user.get("fullName")
    if name:
        return str(name)
    parts = [data.get("firstName"), data.get("middleName"), data.get("lastName")]
    return " ".join(str(p) for p in parts if p) or NA


def _first(data: Optional[dict], *keys: str, default: str = "") -> str:
    for key in keys:
        value = (data or {}).get(key)
        if value:
            return str(value)
    return default


def pdf_filename(prescription_id, patient_name: str) -> str:
    if patient_name == NA:
        slug = "paciente"
    else:
        slug = re.sub(r"\s+", "_", re.sub(r"[^\w\s-]", "", patient_name)).lower()
    return f"prescripcion_{prescription_id}_{slug}.pdf"


class _Page:
    """Top-down text cursor over a reportlab canvas."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.y = PAGE_HEIGHT - MARGIN

    def _ensure_room(self, needed: float) -> None:
        if self.y - needed < MARGIN:
            self.c.showPage()
            self.y = PAGE_HEIGHT - MARGIN

    def space(self, points: float) -> None:
        self.y -= points

    def line(self, text: str, *, size: int = 11, bold: bool = False, center: bool = False, underline: bool = False):
        font = "Helvetica-Bold" if bold else "Helvetica"
        for chunk in simpleSplit(text, font, size, TEXT_WIDTH) or [""]:
            self._ensure_room(size + 4)
            self.c.setFont(font, size)
            if center:
                self.c.drawCentredString(PAGE_WIDTH / 2, self.y, chunk)
            else:
                self.c.drawString(MARGIN, self.y, chunk)
                if underline:
                    width = self.c.stringWidth(chunk, font, size)
                    self.c.line(MARGIN, self.y - 2, MARGIN + width, self.y - 2)
            self.y -= size + 4

    def rule(self) -> None:
        self._ensure_room(10)
        self.c.line(MARGIN, self.y, PAGE_WIDTH - MARGIN, self.y)
        self.y -= 10

    def heading(self, text: str) -> None:
        self.space(8)
        self.line(text, size=13, underline=True)
        self.space(4)


def build_pdf(
    prescription: Prescription,
    *,
    patient: Optional[dict],
    doctor: Optional[dict],
    main_diagnosis: Optional[Diagnostic],
) -> bytes:
    record = prescription.medical_record

    patient_name = full_name(patient)
    patient_doc = " ".join(
        p for p in (_first(patient, "documentType", "docType"), _first(patient, "documentNumber", "docNumber")) if p
    )
    age = calculate_age((patient or {}).get("dateOfBirth") or (patient or {}).get("birthDate"))

    doctor_name = full_name(doctor)
    doctor_doc = _first(doctor, "documentNumber", "docNumber")
    doctor_license = _first(doctor, "professionalCard", "licenseNumber", "registroMedico")

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.setTitle(f"Prescripción {prescription.id}")
    page = _Page(c)

    page.line("Sistema MedCore - Prescripción Médica", size=18, center=True)
    page.space(4)
    page.line("Generada por MedCore Medical Records Service", size=10, center=True)
    page.space(6)
    page.rule()

    page.heading("Datos del Paciente")
    page.line(f"Nombre: {patient_name}")
    page.line(f"Documento: {patient_doc}")
    page.line(f"Edad: {f'{age} años' if age is not None else NA}")
    page.line(f"Dirección: {_first(patient, 'address', 'direccion', default=NA)}")
    page.line(f"Teléfono: {_first(patient, 'phone', 'phoneNumber', default=NA)}")
    page.space(4)
    page.line(f"ID Paciente (sistema): {record.patient_id or NA}")

    page.heading("Datos del Médico")
    page.line(f"Nombre: {doctor_name}")
    if doctor_doc:
        page.line(f"Documento: {doctor_doc}")
    if doctor_license:
        page.line(f"Registro profesional: {doctor_license}")
    page.line(f"ID Médico (sistema): {record.physician_id or NA}")

    page.heading("Datos de la Historia Clínica")
    issued = timezone.localtime(prescription.prescription_date or record.date)
    page.line(f"Fecha de la prescripción: {issued:%d/%m/%Y %H:%M}")
    if record.appointment_id:
        page.line(f"Cita asociada: {record.appointment_id}")
    if main_diagnosis is not None:
        page.space(2)
        page.line(f"Diagnóstico principal: {main_diagnosis.disease_code} - {main_diagnosis.disease_name}")
        if main_diagnosis.diagnosis:
            page.line(f"Detalle diagnóstico: {main_diagnosis.diagnosis}")
    else:
        page.line(f"Diagnóstico principal: {NA}")
    if record.notes:
        page.space(2)
        page.line(f"Notas de la consulta: {record.notes}")
    page.space(4)
    page.rule()

    page.heading("Detalle de la Prescripción")
    page.line(f"Medicamento: {prescription.medication}")
    page.line(f"Dosis: {prescription.dosage}")
    page.line(f"Frecuencia: {prescription.frequency}")
    page.line(f"Duración: {prescription.duration}")
    if prescription.instructions:
        page.space(2)
        page.line(f"Instrucciones: {prescription.instructions}")

    page.space(24)
    page.line("Firma del médico:")
    page.space(24)
    page.line("______________________________")
    page.line(doctor_name)
    if doctor_license:
        page.line(f"Reg. Prof.: {doctor_license}")

    c.showPage()
    c.save()
    return buf.getvalue()


def render_prescription_pdf(prescription: Prescription, *, auth_token: Optional[str] = None) -> RenderedPdf:
    """
    Renders the prescription, writes it to `patients/prescriptions/` (replacing any
    previous render) and returns the bytes.
    """
    record = prescription.medical_record
    identity = get_integrations().identity

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="pdf") as pool:
        patient_f = pool.submit(identity.get_patient_info, record.patient_id, auth_token)
        doctor_f = pool.submit(identity.get_user_details, record.physician_id, auth_token)
        patient: Any = patient_f.result()
        doctor: Any = doctor_f.result()

    patient = patient if isinstance(patient, dict) else None
    doctor = doctor if isinstance(doctor, dict) else None

    active = list(
        Diagnostic.objects.filter(medical_record=record, state=DiagnosticState.ACTIVE).order_by("-created_at")
    )
    content = build_pdf(prescription, patient=patient, doctor=doctor, main_diagnosis=pick_linked_diagnostic(active))

    filename = pdf_filename(prescription.id, full_name(patient))
    path = f"{PRESCRIPTIONS_DIR}/{filename}"

    storage = FileSystemStorage()
    if storage.exists(path):
        storage.delete(path)
    saved = storage.save(path, ContentFile(content))
    logger.info("Prescription PDF written to %s", saved)

    return RenderedPdf(filename=filename, path=saved, content=content)
