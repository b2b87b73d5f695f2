from django.utils import timezone
from rest_framework.exceptions import NotFound

from health.models import Outbreak
from health.services.audit import log_action


def list_outbreaks(status=None, ward=None):
    qs = Outbreak.objects.all().order_by('-reported_date')
    if status:
        qs = qs.filter(status=status)
    if ward:
        qs = qs.filter(ward=ward)
    return qs


def create_outbreak(fields: dict, *, user=None) -> Outbreak:
    outbreak = Outbreak.objects.create(**fields)
    log_action(user=user, action='outbreak_create', object_type='outbreak', object_id=outbreak.id,
               detail={'disease': outbreak.disease, 'ward': outbreak.ward})
    return outbreak


def update_outbreak(outbreak_id, fields: dict, *, user=None) -> Outbreak:
    """Apply field changes; moving to Resolved stamps ``resolved_date`` once."""
    outbreak = Outbreak.objects.filter(id=outbreak_id).first()
    if outbreak is None:
        raise NotFound('Outbreak not found')
    previous_status = outbreak.status
    for field, value in fields.items():
        setattr(outbreak, field, value)
    if outbreak.status == 'Resolved' and outbreak.resolved_date is None:
        outbreak.resolved_date = timezone.now()
    elif outbreak.status != 'Resolved':
        outbreak.resolved_date = None
    outbreak.save()
    log_action(user=user, action='outbreak_update', object_type='outbreak', object_id=outbreak.id,
               detail={'from': previous_status, 'to': outbreak.status})
    return outbreak
