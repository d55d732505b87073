# mr_core/common/permissions.py

from __future__ import annotations

from typing import Set

from rest_framework.permissions import BasePermission, SAFE_METHODS

# Role names as carried in the `role` claim of the upstream JWT
ROLE_ADMIN = "ADMINISTRADOR"
ROLE_DOCTOR = "MEDICO"
ROLE_NURSE = "ENFERMERO"

CLINICAL_ROLES = frozenset({ROLE_ADMIN, ROLE_DOCTOR, ROLE_NURSE})
PRESCRIBER_ROLES = frozenset({ROLE_ADMIN, ROLE_DOCTOR})


def user_roles(user) -> Set[str]:
    """
    Resolve roles from the token claims exposed by the authenticated user:
    `role` (single value) and optionally `roles` (list).
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    role = getattr(user, "role", None)
    if role:
        roles.add(str(role).upper())

    extra = getattr(user, "roles", None)
    if extra:
        if isinstance(extra, (list, tuple, set)):
            roles.update(str(r).upper() for r in extra)
        else:
            roles.add(str(extra).upper())

    return roles


def is_admin(user) -> bool:
    return ROLE_ADMIN in user_roles(user)


class BaseRolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    - Requires authentication.
    - ADMINISTRADOR bypass.
    - Uses allowed_roles_per_action for strict RBAC.
    - If the action is unknown and the request is SAFE, falls back to list/retrieve
      instead of denying.
    """
    message = "No tiene permisos para realizar esta acción."

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action = {
        "list": CLINICAL_ROLES,
        "retrieve": CLINICAL_ROLES,
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        roles = user_roles(user)

        if ROLE_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            read_action = "retrieve" if is_detail else "list"
            allowed = self.allowed_roles_per_action.get(read_action)

        if allowed is not None:
            return bool(roles & set(allowed))

        # Unknown action => deny by default
        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class MedicalRecordPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": CLINICAL_ROLES,
        "retrieve": CLINICAL_ROLES,
        "create": CLINICAL_ROLES,
        "update": CLINICAL_ROLES,
        "partial_update": CLINICAL_ROLES,
        "destroy": PRESCRIBER_ROLES,
        "by_patient": CLINICAL_ROLES,
        "by_appointment": CLINICAL_ROLES,
    }


class DiagnosticPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "create": PRESCRIBER_ROLES,
        "by_medical_record": CLINICAL_ROLES,
    }


class PrescriptionPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": CLINICAL_ROLES,
        "retrieve": CLINICAL_ROLES,
        "create": PRESCRIBER_ROLES,
        "update": PRESCRIBER_ROLES,
        "partial_update": PRESCRIBER_ROLES,
        "destroy": PRESCRIBER_ROLES,
        "pdf": CLINICAL_ROLES,
        "by_patient": CLINICAL_ROLES,
    }


class DiseaseCatalogPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": CLINICAL_ROLES,
        "retrieve": CLINICAL_ROLES,
        "by_code": CLINICAL_ROLES,
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }


class DocumentPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "upload": CLINICAL_ROLES,
        "by_patient": CLINICAL_ROLES,
        "retrieve": CLINICAL_ROLES,
        "destroy": PRESCRIBER_ROLES,
    }


class MedicalOrderPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "templates": CLINICAL_ROLES,
        "retrieve": CLINICAL_ROLES,
        "by_patient": CLINICAL_ROLES,
        "laboratory": PRESCRIBER_ROLES,
        "radiology": PRESCRIBER_ROLES,
    }


class LabResultPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": CLINICAL_ROLES,
        "retrieve": CLINICAL_ROLES,
        "create": CLINICAL_ROLES,
        "update": CLINICAL_ROLES,
        "partial_update": CLINICAL_ROLES,
        "destroy": PRESCRIBER_ROLES,
    }


class SearchPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "advanced": CLINICAL_ROLES,
    }
