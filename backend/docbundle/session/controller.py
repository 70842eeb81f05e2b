"""
DocBundle — Session controller (state machine).

Owns the single session: customer identifier, accepted files, output
mode, transient messages and the one live artifact.

  IDLE → POPULATED → GENERATING → READY
  reset: any state → IDLE

Every mutation goes through a controller operation and ends with
observers receiving a fresh SessionSnapshot. Guard and generation
failures are recorded as the transient error message and re-raised.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime

from docbundle.archive.package import package_archive
from docbundle.core.config import PageSpec, settings
from docbundle.errors import (
    DocBundleError,
    GenerationFailedError,
    GenerationInProgressError,
    MissingCustomerIdError,
    NoFilesError,
)
from docbundle.models.artifact import ArtifactKind, GeneratedArtifact
from docbundle.models.files import AcceptedFile, CandidateFile, OutputMode
from docbundle.models.session import (
    ArtifactView,
    MessageKind,
    SessionSnapshot,
    SessionState,
    TransientMessage,
    UploadSummary,
)
from docbundle.pdf.assemble import Decoder, assemble_document
from docbundle.pdf.geometry import decode_image
from docbundle.pipeline.ingest import ingest_batch
from docbundle.session.sinks import ArtifactSink, InMemoryArtifactSink
from docbundle.session.transient import TransientSlot
from docbundle.utils.logging import logger

Observer = Callable[[SessionSnapshot], None]


class SessionController:
    """
    Single writer for the session.

    Runs on one event loop; ``ingest`` and ``generate`` must be awaited
    from it because transient messages schedule their clear timers there.
    """

    def __init__(
        self,
        sink: ArtifactSink | None = None,
        *,
        page: PageSpec | None = None,
        message_ttl: float | None = None,
        decoder: Decoder = decode_image,
        clock: Callable[[], datetime] | None = None,
    ):
        self.sink = sink if sink is not None else InMemoryArtifactSink()
        self.page = page or settings.page
        self.decoder = decoder
        self.clock = clock
        ttl = message_ttl if message_ttl is not None else settings.message_ttl
        self.upload = TransientSlot("upload", ttl, on_clear=self._notify)
        self.error = TransientSlot("error", ttl, on_clear=self._notify)
        self._observers: list[Observer] = []
        self._customer_id = ""
        self._files: list[AcceptedFile] = []
        self._mode = OutputMode.DOCUMENT
        self._state = SessionState.IDLE
        self._artifact: GeneratedArtifact | None = None
        self._handle: str | None = None
        # Bumped by reset and mode switch; a generation started under an
        # older epoch may not store its result.
        self._epoch = 0
        self._next_run = 0
        self._inflight: int | None = None

    # ── read side ─────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def customer_id(self) -> str:
        return self._customer_id

    @property
    def files(self) -> tuple[AcceptedFile, ...]:
        return tuple(self._files)

    @property
    def output_mode(self) -> OutputMode:
        return self._mode

    @property
    def artifact(self) -> GeneratedArtifact | None:
        return self._artifact

    def snapshot(self) -> SessionSnapshot:
        view = None
        if self._artifact is not None and self._handle is not None:
            view = ArtifactView(
                kind=self._artifact.kind,
                filename=self._artifact.suggested_filename,
                handle=self._handle,
                size_bytes=self._artifact.size_bytes,
            )
        return SessionSnapshot(
            customer_id=self._customer_id,
            file_names=[f.name for f in self._files],
            output_mode=self._mode,
            state=self._state,
            upload_message=self.upload.message,
            error_message=self.error.message,
            artifact=view,
        )

    def open_artifact(self) -> bytes | None:
        """Bytes of the current artifact, or None when nothing is live."""
        if self._handle is None:
            return None
        return self.sink.open(self._handle)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer*; returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for observer in list(self._observers):
            observer(snap)

    # ── user events ───────────────────────────────────────

    def set_customer_id(self, text: str) -> SessionSnapshot:
        self._customer_id = text
        if text.strip() and self._error_code() == "MISSING_CUSTOMER_ID":
            self.error.clear()
        self._notify()
        return self.snapshot()

    async def ingest(
        self,
        batch: Sequence[CandidateFile],
        rejected: Sequence[CandidateFile] = (),
    ) -> UploadSummary:
        """Append the valid part of *batch*; existing artifacts stay live."""
        accepted, summary = ingest_batch((f.name for f in self._files), batch, rejected)
        self._files.extend(accepted)
        self.upload.set(summary.to_message())
        if accepted and self._error_code() == "NO_FILES":
            self.error.clear()
        if self._state is not SessionState.GENERATING:
            self._state = self._settled_state()
        self._notify()
        return summary

    def set_output_mode(self, mode: OutputMode | str) -> SessionSnapshot:
        mode = OutputMode(mode)
        if mode is self._mode:
            return self.snapshot()
        self._mode = mode
        self._epoch += 1
        self._release_artifact()
        if self._state is not SessionState.GENERATING:
            self._state = self._settled_state()
        logger.info("Output mode switched to %s", mode.value)
        self._notify()
        return self.snapshot()

    def reset(self) -> SessionSnapshot:
        self._epoch += 1
        self._inflight = None
        self._release_artifact()
        self._customer_id = ""
        self._files = []
        self._mode = OutputMode.DOCUMENT
        self._state = SessionState.IDLE
        self.upload.clear()
        self.error.clear()
        logger.info("Session reset")
        self._notify()
        return self.snapshot()

    async def generate(self) -> GeneratedArtifact:
        """
        Build the artifact for the current output mode.

        Raises MissingCustomerIdError / NoFilesError (checked in that
        order) without starting anything, and ImageDecodeError or
        ArchiveCompressionError when the build fails. Any other exception
        is logged and re-raised as GenerationFailedError. In every failure
        the file list and the previously held artifact are untouched, and
        the state stays READY while that artifact is live. Failures of a
        run that a reset or mode switch made stale are re-raised without
        touching the error message.
        """
        customer_id = self._customer_id.strip()
        try:
            if self._inflight is not None:
                raise GenerationInProgressError()
            if not customer_id:
                raise MissingCustomerIdError()
            if not self._files:
                raise NoFilesError()
        except DocBundleError as exc:
            self._fail(exc)
            raise

        run_id = self._next_run
        self._next_run += 1
        epoch = self._epoch
        files = list(self._files)
        mode = self._mode

        self._inflight = run_id
        self._state = SessionState.GENERATING
        self._notify()
        logger.info(
            "[%s] Generating %s for %d file(s)", customer_id, mode.value, len(files),
        )

        try:
            if mode is OutputMode.DOCUMENT:
                artifact = await assemble_document(
                    files, customer_id, page=self.page, decoder=self.decoder, now=self._now(),
                )
            else:
                artifact = await package_archive(files, customer_id, now=self._now())
        except DocBundleError as exc:
            self._settle(run_id)
            if epoch != self._epoch:
                logger.info("[%s] Ignoring stale failure: %s", customer_id, exc.code)
                self._notify()
            else:
                self._fail(exc)
            raise
        except asyncio.CancelledError:
            self._settle(run_id)
            logger.info("[%s] Generation cancelled", customer_id)
            self._notify()
            raise
        except Exception as exc:
            self._settle(run_id)
            logger.exception("[%s] Generation crashed", customer_id)
            wrapped = GenerationFailedError(str(exc) or type(exc).__name__)
            if epoch != self._epoch:
                self._notify()
            else:
                self._fail(wrapped)
            raise wrapped from exc

        if epoch != self._epoch:
            # Reset or mode switch happened mid-flight; the result is stale
            logger.info("[%s] Discarding stale %s", customer_id, artifact.kind.value)
            self._settle(run_id)
            self._notify()
            return artifact

        self._inflight = None
        self._store(artifact)
        self._state = SessionState.READY
        self.error.clear()
        logger.info(
            "[%s] Ready — %s (%d bytes)", customer_id, artifact.suggested_filename, artifact.size_bytes,
        )
        self._notify()
        return artifact

    # ── internals ─────────────────────────────────────────

    def _now(self) -> datetime | None:
        return self.clock() if self.clock is not None else None

    def _error_code(self) -> str | None:
        return self.error.message.code if self.error.message is not None else None

    def _settled_state(self) -> SessionState:
        """State outside a generation: READY while an artifact is live."""
        if self._artifact is not None:
            return SessionState.READY
        if self._files:
            return SessionState.POPULATED
        return SessionState.IDLE

    def _settle(self, run_id: int) -> None:
        # A reset or a newer run may already own the state.
        if self._inflight == run_id:
            self._inflight = None
            self._state = self._settled_state()

    def _fail(self, exc: DocBundleError) -> None:
        logger.warning("Generation failed: %s — %s", exc.code, exc.message)
        self.error.set(TransientMessage(kind=MessageKind.ERROR, text=exc.message, code=exc.code))
        self._notify()

    def _store(self, artifact: GeneratedArtifact) -> None:
        if ArtifactKind.for_mode(self._mode) is not artifact.kind:
            raise ValueError(f"{artifact.kind.value} artifact does not match {self._mode.value} mode")
        handle = self.sink.publish(artifact)
        if handle != self._handle:
            self._release_artifact()
        self._artifact = artifact
        self._handle = handle

    def _release_artifact(self) -> None:
        if self._handle is not None:
            self.sink.release(self._handle)
        self._artifact = None
        self._handle = None
