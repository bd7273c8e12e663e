# activity_logs/pipeline.py
"""
Audited mutation pipeline.

Every write endpoint goes through the same sequence:

    authorize (permission_classes) -> validate (serializer)
    -> one write on the primary entity -> one ActivityLog row -> respond

The write and its ActivityLog row share one database transaction, so a
failed audit insert rolls the mutation back and a failed mutation leaves no
audit row.
"""
import logging

from django.db import transaction
from rest_framework import status, viewsets
from rest_framework.exceptions import NotAuthenticated
from rest_framework.response import Response

from users.session import resolve_session

from .details import build_details, jsonable
from .models import ActivityLog

logger = logging.getLogger(__name__)


def record_activity(user, action, entity, entity_id, details=None, role=None) -> ActivityLog:
    """Append one audit row. `details` must already match the action's variant."""
    log = ActivityLog.objects.create(
        user=user,
        role=role or user.role,
        action=action,
        entity=entity,
        entity_id=str(entity_id),
        details=details or {},
    )
    logger.info("%s %s %s#%s", user.user_id, action, entity, entity_id)
    return log


def run_audited(request, action, entity, operation, details_builder):
    """
    Run `operation()` and append its audit row atomically.

    `operation` performs the single write and returns the affected instance;
    `details_builder(instance)` returns the keyword arguments for the action's
    details variant. Returns whatever `operation` returned.
    """
    session = resolve_session(request)
    if session is None:
        raise NotAuthenticated()

    with transaction.atomic():
        instance = operation()
        details = build_details(action, **details_builder(instance))
        record_activity(
            request.user,
            action,
            entity,
            getattr(instance, "pk", instance),
            details,
            role=session.role,
        )
    return instance


def changed_fields(validated_data) -> dict:
    """Validated payload in audit-friendly form (foreign keys reduced to ids)."""
    return jsonable(dict(validated_data))


class AuditedModelViewSet(viewsets.ModelViewSet):
    """
    ModelViewSet whose create/update/destroy run through `run_audited`.

    Subclasses set:
      audit_entity   -- entity name stored on the row ("Member")
      audit_actions  -- {"create": Action..., "update": Action..., "delete": Action...}
    and implement `audit_details(verb, instance)` for create/delete; updates
    record the validated changes.
    """

    audit_entity: str = ""
    audit_actions: dict = {}

    def audit_details(self, verb, instance) -> dict:
        raise NotImplementedError

    # ---------- hooks for subclasses ----------

    def save_new(self, serializer):
        return serializer.save(created_by=self.request.user)

    def save_existing(self, serializer):
        return serializer.save()

    # ---------- audited writes ----------

    def perform_create(self, serializer):
        return run_audited(
            self.request,
            self.audit_actions["create"],
            self.audit_entity,
            lambda: self.save_new(serializer),
            lambda instance: self.audit_details("create", instance),
        )

    def perform_update(self, serializer):
        changes = changed_fields(serializer.validated_data)
        return run_audited(
            self.request,
            self.audit_actions["update"],
            self.audit_entity,
            lambda: self.save_existing(serializer),
            lambda instance: {"changes": changes},
        )

    def perform_destroy(self, instance):
        pk = instance.pk
        details = self.audit_details("delete", instance)

        def _delete():
            instance.delete()
            return pk

        return run_audited(
            self.request,
            self.audit_actions["delete"],
            self.audit_entity,
            _delete,
            lambda _: details,
        )

    # ---------- responses ----------

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        instance = self.perform_create(serializer)
        data = self.get_serializer(self.refetch(instance)).data
        return Response(data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        instance = self.perform_update(serializer)
        return Response(self.get_serializer(self.refetch(instance)).data)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        return Response({"success": True}, status=status.HTTP_200_OK)

    def refetch(self, instance):
        """Reload through get_queryset so related objects in the response are expanded."""
        return self.get_queryset().get(pk=instance.pk)
