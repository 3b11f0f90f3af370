"""Preprint creation workflow.

The service refuses to publish a preprint that has no primary file, and a
file can only be attached to a preprint that already exists. Creating a
published preprint therefore takes four remote calls, run strictly in
this order:

    DRAFT_REQUESTED --create--> DRAFT_CREATED --upload--> FILE_UPLOADED
        --patch--> RELATIONSHIP_PATCHED [--publish--> PUBLISHED]

1. create:  POST the preprint with ``is_published`` stripped and the
            ``provider`` relationship set.
2. upload:  PUT the primary file to the storage host, under the new
            preprint.
3. patch:   PATCH ``primary_file`` onto the preprint (relationship only).
4. publish: PATCH ``is_published=true``; only when publication was asked for.

The sequence is not atomic. Nothing is retried and nothing is rolled back:
a failure (or cancellation) at any stage raises
:class:`~osfapi.errors.WorkflowStageError` carrying the stage name and the
identifiers created so far, so the caller can resume, publish by hand, or
delete the orphaned draft.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from os import PathLike
from typing import TYPE_CHECKING, BinaryIO, NamedTuple, TypeVar

from osfapi.errors import OSFError, WorkflowStageError
from osfapi.schemas.file import TYPE_FILES
from osfapi.schemas.jsonapi import ResourceReference, SinglePayload
from osfapi.schemas.preprint import TYPE_PREPRINTS, Preprint, PreprintRequest, build_preprint
from osfapi.schemas.provider import TYPE_PROVIDERS
from osfapi.services.file_service import resolve_file_name

if TYPE_CHECKING:
    from osfapi.client import OSFClient
    from osfapi.transport import Cancellation

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CreationState(str, Enum):
    """Progress of one preprint creation."""

    DRAFT_REQUESTED = "draft_requested"
    DRAFT_CREATED = "draft_created"
    FILE_UPLOADED = "file_uploaded"
    RELATIONSHIP_PATCHED = "relationship_patched"
    PUBLISHED = "published"


class CreationStage(str, Enum):
    """The remote step a workflow failure is attributed to."""

    CREATE = "create"
    UPLOAD = "upload"
    PATCH = "patch"
    PUBLISH = "publish"


class CreationResult(NamedTuple):
    """Outcome of a completed creation workflow."""

    preprint: Preprint
    state: CreationState
    preprint_id: str
    file_id: str
    payload: SinglePayload[Preprint, object]

    @property
    def last_stage(self) -> CreationStage:
        """The last remote step that ran."""
        if self.state is CreationState.PUBLISHED:
            return CreationStage.PUBLISH
        return CreationStage.PATCH


def normalize_file_id(file_id: str, provider: str = "osfstorage") -> str:
    """Strip the storage provider prefix from an uploaded file id.

    The storage host answers with ids like ``"osfstorage/abc123"`` while
    the API expects the bare ``"abc123"``.
    """
    prefix = f"{provider}/"
    if file_id.startswith(prefix):
        return file_id[len(prefix):]
    return file_id


class PreprintCreationWorkflow:
    """Runs the create, upload, patch, publish sequence for one preprint.

    Instances hold no state between :meth:`run` calls; independent runs
    may proceed concurrently from different threads.

    Args:
        client: The owning client.
    """

    def __init__(self, client: OSFClient) -> None:
        self.client = client

    def run(
        self,
        provider_id: str,
        attributes: PreprintRequest,
        primary_file: str | PathLike[str] | BinaryIO,
        *,
        file_name: str | None = None,
        publish: bool | None = None,
        cancellation: Cancellation | None = None,
    ) -> CreationResult:
        """Create a preprint, attach its primary file and optionally publish.

        A path is opened before anything is sent, so an unreadable file
        fails without creating a draft.

        Args:
            provider_id: Preprint provider the preprint is submitted to.
            attributes: Preprint attributes. Not modified.
            primary_file: Path or binary stream of the primary file.
            file_name: Stored file name; defaults to the base name of the
                path or of the stream's ``name``.
            publish: Whether to publish at the end. Defaults to
                ``attributes.is_published``.
            cancellation: Checked before every stage.

        Returns:
            The final preprint with the reached state and identifiers.

        Raises:
            ValueError: If ``provider_id`` is empty or no file name can be
                determined.
            WorkflowStageError: If a stage fails or is cancelled.
        """
        if not provider_id:
            raise ValueError("a preprint provider id is required to create a preprint")
        if publish is None:
            publish = bool(attributes.is_published)

        file_name = resolve_file_name(primary_file, file_name)

        if isinstance(primary_file, (str, PathLike)):
            with open(primary_file, "rb") as stream:
                return self._run(provider_id, attributes, stream, file_name, publish, cancellation)
        return self._run(provider_id, attributes, primary_file, file_name, publish, cancellation)

    def _run(
        self,
        provider_id: str,
        attributes: PreprintRequest,
        stream: BinaryIO,
        file_name: str,
        publish: bool,
        cancellation: Cancellation | None,
    ) -> CreationResult:
        client = self.client
        preprint_id: str | None = None
        file_id: str | None = None

        def stage(step: CreationStage, call: Callable[[], T]) -> T:
            try:
                if cancellation is not None:
                    cancellation.raise_if_cancelled(f"preprint creation ({step.value})")
                return call()
            except OSFError as exc:
                logger.warning(
                    "Preprint creation failed at stage '%s' (preprint=%s, file=%s): %s",
                    step.value,
                    preprint_id,
                    file_id,
                    exc,
                )
                raise WorkflowStageError(step.value, exc, preprint_id, file_id) from exc

        # 1. Draft: publish flag stripped, provider linked.
        draft = attributes.model_copy(update={"is_published": None})

        def create() -> tuple[Preprint, SinglePayload[Preprint, object]]:
            body = client.codec.encode_single(
                TYPE_PREPRINTS,
                attributes=draft,
                relationships={
                    "provider": ResourceReference(type=TYPE_PROVIDERS, id=provider_id),
                },
            )
            request = client.new_request("POST", "preprints/", body=body)
            result = client.codec.execute_single(
                client.transport,
                request,
                Preprint,
                resource_type=TYPE_PREPRINTS,
                build=build_preprint,
                cancellation=cancellation,
            )
            return result.value, result.payload

        preprint, payload = stage(CreationStage.CREATE, create)
        preprint_id = preprint.id
        logger.info("Preprint %s: %s", preprint_id, CreationState.DRAFT_CREATED.value)

        # 2. Primary file upload to the storage host.
        uploaded, _ = stage(
            CreationStage.UPLOAD,
            lambda: client.files.upload_file(
                preprint_id, stream, file_name, cancellation=cancellation
            ),
        )
        file_id = normalize_file_id(uploaded.id, client.settings.storage_provider)
        logger.info("Preprint %s: %s (file %s)", preprint_id, CreationState.FILE_UPLOADED.value, file_id)

        # 3. Relationship-only patch attaching the primary file.
        preprint, payload = stage(
            CreationStage.PATCH,
            lambda: client.preprints.update_preprint(
                preprint_id,
                relationships={"primary_file": ResourceReference(type=TYPE_FILES, id=file_id)},
                cancellation=cancellation,
            ),
        )
        state = CreationState.RELATIONSHIP_PATCHED
        logger.info("Preprint %s: %s", preprint_id, state.value)

        # 4. Publish, now that the primary file is attached.
        if publish:
            preprint, payload = stage(
                CreationStage.PUBLISH,
                lambda: client.preprints.update_preprint(
                    preprint_id,
                    PreprintRequest(is_published=True),
                    cancellation=cancellation,
                ),
            )
            state = CreationState.PUBLISHED
            logger.info("Preprint %s: %s", preprint_id, state.value)

        return CreationResult(preprint, state, preprint_id, file_id, payload)
