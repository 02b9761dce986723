from sqlalchemy.orm import Session
from models.audit_log import AuditLog
from schemas.audit_log import AuditLogCreate
from utils import sqlalchemy_to_dict


def create_audit_log(db: Session, log_entry: AuditLogCreate):
    # Joins the caller's transaction; the caller commits
    db_log_entry = AuditLog(**log_entry.model_dump())
    db.add(db_log_entry)
    return db_log_entry


def log_change(db: Session, table_name: str, record_id: int, changed_by: str, action: str, old_values=None, new_obj=None):
    log_entry = AuditLogCreate(
        table_name=table_name,
        record_id=record_id,
        changed_by=changed_by,
        action=action,
        old_values=old_values or {},
        new_values=sqlalchemy_to_dict(new_obj) if new_obj is not None else {},
    )
    return create_audit_log(db, log_entry)


def get_audit_logs(db: Session, table_name: str, record_id: int):
    return db.query(AuditLog).filter(
        AuditLog.table_name == table_name,
        AuditLog.record_id == record_id
    ).order_by(AuditLog.changed_at.asc(), AuditLog.id.asc()).all()
