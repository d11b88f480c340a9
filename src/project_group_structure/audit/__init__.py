"""Audit trail of project creation decisions."""
from __future__ import annotations

from project_group_structure.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
