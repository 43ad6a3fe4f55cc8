from sqlalchemy.orm import Session
from eventhub.models.audit_model import AuditLog


def record_audit(db: Session, user_id, action: str, entity_type: str = None, entity_id=None):
    """Stage an audit row; it is committed with the caller's transaction."""
    db.add(AuditLog(user_id=user_id, action=action, entity_type=entity_type, entity_id=entity_id))
