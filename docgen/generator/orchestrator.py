"""
Generation Orchestrator - Drives one unit of generation work end to end.

Every unit runs the same fixed sequence, each step starting only after
the previous one completed:

    ownership -> credit reserved -> prompt -> backend -> validation -> persist

Any step may fail with a DocGenError; nothing is retried here. The
credit is taken atomically before the backend call and given back when
any later step fails, so only persisted artifacts are charged.
"""

import json
from typing import Dict, Any, List, Optional, Sequence, Union

from .batch import BatchResult, StatusCallback, run_batch
from .producers import Artifact, WireframeProducer, create_producer
from ..core.config import AppConfig, WireframeFormat, UNLIMITED_CREDITS
from ..core.errors import (
    ConfigurationError,
    Forbidden,
    GenerationFailed,
    InsufficientCredits,
    MalformedResponse,
    MissingPrerequisite,
    NotFound,
)
from ..llm.base import BaseLLMClient
from ..llm.ui_client import BaseUIClient
from ..models.documents import DocumentType, GeneratedDocument, Profile, Project
from ..models.estimate import ChiffrageEstimate
from ..models.wireframe import Wireframe, HtmlWireframe, PreviewWireframe
from ..parser.screen_parser import parse_screens
from ..prompts.builder import build_prompt
from ..storage.base import (
    BaseStore,
    DOCUMENTS,
    PROFILES,
    PROJECTS,
    TRANSCRIPTIONS,
    WIREFRAMES,
    WIREFRAMES_HTML,
)
from ..utils.id_generator import truncate_string
from ..utils.logger import get_logger, LogContext
from ..validator.response_cleaner import ResponseFormat, clean_response

logger = get_logger(__name__)


class GenerationOrchestrator:
    """
    Orchestrates document and wireframe generation for one store.

    The orchestrator holds no per-request state; it is safe to share
    between threads, which is how batch generation uses it.

    Example:
        orchestrator = GenerationOrchestrator(store, llm_client)
        document = orchestrator.generate_document(user_id, project_id, "user_stories")
    """

    def __init__(
        self,
        store: BaseStore,
        llm_client: Optional[BaseLLMClient] = None,
        ui_client: Optional[BaseUIClient] = None,
        config: Optional[AppConfig] = None,
        producers: Optional[Dict[WireframeFormat, WireframeProducer]] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Record store
            llm_client: Text generation backend (documents, tree and html wireframes)
            ui_client: UI generation backend (preview wireframes)
            config: Application configuration
            producers: Explicit producers per wireframe format; built on
                demand from the clients otherwise
        """
        self.store = store
        self.llm_client = llm_client
        self.ui_client = ui_client
        self.config = config or AppConfig()
        self._producers: Dict[WireframeFormat, WireframeProducer] = dict(producers or {})

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _check_ownership(self, owner_id: str, project_id: str) -> Project:
        record = self.store.get(PROJECTS, project_id)
        if record is None:
            raise NotFound(f"Project not found: {project_id}")
        if record.get("user_id") != owner_id:
            raise Forbidden(f"Project {project_id} belongs to another user")
        return Project.from_record(record)

    def _reserve_credit(self, owner_id: str) -> Profile:
        """
        Take one credit before any work starts.

        Concurrent generations for the same owner can never spend more
        credits than the balance holds. Give the credit back with
        _refund_credit when the unit fails before its artifact persists.
        """
        record = self.store.get(PROFILES, owner_id)
        if record is None:
            raise NotFound(f"Profile not found: {owner_id}")

        profile = Profile.from_record(record)
        if profile.is_unlimited:
            return profile

        balance = self.store.debit_credit(owner_id)
        if balance is None:
            raise InsufficientCredits("No credits remaining")
        logger.debug(f"Profile {owner_id} reserved a credit, {balance} left")
        return profile

    def _refund_credit(self, profile: Profile) -> None:
        if profile.is_unlimited:
            return
        balance = self.store.refund_credit(profile.id)
        logger.info(f"Refunded credit to profile {profile.id} ({balance} left)")

    def _load_screens_document(self, project_id: str) -> GeneratedDocument:
        records = self.store.list(
            DOCUMENTS,
            order_by="-generated_at",
            project_id=project_id,
            type=DocumentType.SCREENS_PROMPTS.value,
        )
        if not records:
            raise MissingPrerequisite(
                "Generate the screens_prompts document first",
                document_type=DocumentType.SCREENS_PROMPTS.value,
            )
        return GeneratedDocument.from_record(records[0])

    def _call_backend(self, prompt: str) -> str:
        if self.llm_client is None:
            raise ConfigurationError("No text generation client configured")

        response = self.llm_client.generate(prompt)
        if not response.success:
            logger.error(f"Backend call failed: {response.error_message}")
            raise GenerationFailed(response.error_message or "Generation backend returned an error")
        return response.content

    def _validate_document(self, document_type: DocumentType, raw: str) -> str:
        if not document_type.is_structured:
            return clean_response(raw, ResponseFormat.MARKDOWN)

        payload = clean_response(raw, ResponseFormat.ESTIMATE)
        try:
            estimate = ChiffrageEstimate.from_dict(payload)
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"Estimate payload rejected: {e}: {truncate_string(raw, 200)}")
            raise MalformedResponse(f"Invalid estimate payload: {e}", raw_response=raw)

        logger.info(f"Estimate has {len(estimate.sections)} sections, {estimate.feature_count} features")
        return json.dumps(payload, ensure_ascii=False, indent=2)

    def producer_for(self, wireframe_format: Union[WireframeFormat, str, None] = None) -> WireframeProducer:
        """Producer for a format (the configured default when None)."""
        if wireframe_format is None:
            wireframe_format = self.config.generation.wireframe_format
        elif isinstance(wireframe_format, str):
            wireframe_format = WireframeFormat.from_string(wireframe_format)

        if wireframe_format not in self._producers:
            self._producers[wireframe_format] = create_producer(
                wireframe_format,
                llm_client=self.llm_client,
                ui_client=self.ui_client,
                config=self.config.generation,
            )
        return self._producers[wireframe_format]

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def generate_document(
        self,
        owner_id: str,
        project_id: str,
        document_type: Union[DocumentType, str],
        daily_rate: Optional[float] = None,
    ) -> GeneratedDocument:
        """
        Generate one documentation artifact from the project's transcripts.

        The new document supersedes any previous one of the same type.

        Args:
            owner_id: Requesting profile id
            project_id: Target project
            document_type: Type of document to generate
            daily_rate: Daily rate for cost estimates (config default when None)

        Returns:
            The persisted GeneratedDocument
        """
        document_type = DocumentType.resolve(document_type)

        with LogContext(logger, "Generating document", project_id=project_id, type=document_type.value):
            project = self._check_ownership(owner_id, project_id)
            profile = self._reserve_credit(owner_id)
            try:
                return self._write_document(project, document_type, daily_rate)
            except Exception:
                self._refund_credit(profile)
                raise

    def _write_document(
        self,
        project: Project,
        document_type: DocumentType,
        daily_rate: Optional[float],
    ) -> GeneratedDocument:
        transcripts = self.store.list(TRANSCRIPTIONS, order_by="uploaded_at", project_id=project.id)
        if not transcripts:
            raise MissingPrerequisite("Upload at least one transcript first")

        if daily_rate is None:
            daily_rate = self.config.estimate.default_daily_rate
        options = {"daily_rate": daily_rate} if daily_rate else {}

        prompt = build_prompt(
            document_type,
            project.name,
            [t["content"] for t in transcripts],
            options=options,
            separator=self.config.generation.transcript_separator,
        )

        raw = self._call_backend(prompt)
        content = self._validate_document(document_type, raw)

        document = GeneratedDocument(project_id=project.id, type=document_type, content=content)
        self.store.replace(DOCUMENTS, document.to_record(), ("project_id", "type"))
        return document

    def get_document(
        self,
        owner_id: str,
        project_id: str,
        document_type: Union[DocumentType, str],
    ) -> Optional[GeneratedDocument]:
        """Latest document of a type, or None."""
        document_type = DocumentType.resolve(document_type)
        self._check_ownership(owner_id, project_id)
        records = self.store.list(
            DOCUMENTS,
            order_by="-generated_at",
            project_id=project_id,
            type=document_type.value,
        )
        return GeneratedDocument.from_record(records[0]) if records else None

    # ------------------------------------------------------------------
    # Wireframes
    # ------------------------------------------------------------------

    def generate_wireframe(
        self,
        owner_id: str,
        project_id: str,
        screen_index: int = 0,
        wireframe_format: Union[WireframeFormat, str, None] = None,
    ) -> Artifact:
        """
        Generate one wireframe artifact.

        Args:
            owner_id: Requesting profile id
            project_id: Target project
            screen_index: Screen to generate (ignored by the tree variant,
                which covers every screen)
            wireframe_format: Variant (configured default when None)

        Returns:
            Wireframe, HtmlWireframe or PreviewWireframe
        """
        producer = self.producer_for(wireframe_format)

        with LogContext(
            logger,
            "Generating wireframe",
            project_id=project_id,
            format=producer.format.value,
            screen_index=screen_index if producer.per_screen else "all",
        ):
            self._check_ownership(owner_id, project_id)
            profile = self._reserve_credit(owner_id)
            try:
                document = self._load_screens_document(project_id)
                unit = producer.select(project_id, document.content, screen_index)

                artifact = producer.produce(unit)
                producer.persist(self.store, artifact)
            except Exception:
                self._refund_credit(profile)
                raise
            return artifact

    def generate_wireframes(self, owner_id: str, project_id: str) -> Wireframe:
        """Generate the element-tree wireframes for every screen of a project."""
        return self.generate_wireframe(owner_id, project_id, wireframe_format=WireframeFormat.TREE)

    def generate_screen_wireframe(self, owner_id: str, project_id: str, screen_index: int) -> HtmlWireframe:
        """Generate the markup wireframe of one screen."""
        return self.generate_wireframe(owner_id, project_id, screen_index, WireframeFormat.HTML)

    def generate_preview(self, owner_id: str, project_id: str, screen_index: int = 0) -> PreviewWireframe:
        """Generate a hosted UI preview of one screen."""
        return self.generate_wireframe(owner_id, project_id, screen_index, WireframeFormat.PREVIEW)

    def generate_screen_wireframes(
        self,
        owner_id: str,
        project_id: str,
        screen_indexes: Sequence[int],
        wireframe_format: Union[WireframeFormat, str, None] = WireframeFormat.HTML,
        on_status: Optional[StatusCallback] = None,
    ) -> BatchResult:
        """
        Generate several per-screen wireframes concurrently.

        Each screen runs the full pipeline on its own and is charged on
        its own; one screen failing never fails the others.

        Args:
            owner_id: Requesting profile id
            project_id: Target project
            screen_indexes: Screens to generate
            wireframe_format: Per-screen variant (html or preview)
            on_status: Called on each status transition

        Returns:
            BatchResult with a terminal status per screen
        """
        producer = self.producer_for(wireframe_format)
        if not producer.per_screen:
            raise ConfigurationError(f"The {producer.format.value} variant is not generated per screen")

        # Fail fast on ownership before fanning out
        self._check_ownership(owner_id, project_id)

        logger.info(f"Batch of {len(screen_indexes)} {producer.format.value} wireframes for {project_id}")
        return run_batch(
            screen_indexes,
            lambda index: self.generate_wireframe(owner_id, project_id, index, producer.format),
            on_status=on_status,
        )

    def get_wireframe(self, owner_id: str, project_id: str) -> Optional[Wireframe]:
        """Stored element-tree wireframes of a project, or None."""
        self._check_ownership(owner_id, project_id)
        record = self.store.find_one(WIREFRAMES, project_id=project_id)
        return Wireframe.from_record(record) if record else None

    def list_screens(self, owner_id: str, project_id: str) -> Dict[str, Any]:
        """
        Selectable screens and the markup wireframes already generated.

        A stored wireframe is stale when the screen now at its index no
        longer has the content it was generated from.

        Returns:
            {"has_document", "screens": [{index, name, hash}], "wireframes": [...]}
        """
        self._check_ownership(owner_id, project_id)

        try:
            document = self._load_screens_document(project_id)
        except MissingPrerequisite:
            screens = []
            has_document = False
        else:
            screens = parse_screens(document.content)
            has_document = True

        hashes = {s.index: s.content_hash for s in screens}
        wireframes: List[Dict[str, Any]] = []
        for record in self.store.list(WIREFRAMES_HTML, order_by="screen_index", project_id=project_id):
            wireframe = HtmlWireframe.from_record(record)
            current = hashes.get(wireframe.screen_index)
            stale = current is None or (bool(wireframe.screen_hash) and wireframe.screen_hash != current)
            wireframes.append({**wireframe.to_record(), "stale": stale})

        return {
            "has_document": has_document,
            "screens": [s.to_dict() for s in screens],
            "wireframes": wireframes,
        }

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def assign_plan(self, profile_id: str, plan: str) -> Profile:
        """Switch a profile to a plan and reset its credits to the plan allowance."""
        credits = self.config.credits.credits_for_plan(plan)
        record = self.store.get(PROFILES, profile_id)
        if record is None:
            raise NotFound(f"Profile not found: {profile_id}")

        updated = self.store.update(PROFILES, profile_id, {"plan": plan, "credits_remaining": credits})
        label = "unlimited" if credits == UNLIMITED_CREDITS else str(credits)
        logger.info(f"Profile {profile_id} moved to {plan} plan ({label} credits)")
        return Profile.from_record(updated)
