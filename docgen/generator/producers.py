"""
Wireframe Producers - One abstraction over the wireframe artifact variants.

Each producer owns three steps of a wireframe generation:
- select: locate the unit of work in the screens document and build its prompt
- produce: call its backend and validate the response into an artifact
- persist: write the artifact with the variant's replace policy

Variants:
- tree: one JSON element tree for the whole project (replace by project_id)
- html: styled markup per screen (upsert by project_id + screen_index)
- preview: hosted UI preview per screen (upsert by project_id + screen_index)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any, Optional, Union

from ..core.config import GenerationConfig, WireframeFormat
from ..core.errors import (
    ConfigurationError,
    GenerationFailed,
    MalformedResponse,
    MissingPrerequisite,
    NotFound,
)
from ..llm.base import BaseLLMClient
from ..llm.ui_client import BaseUIClient
from ..models.documents import DocumentType
from ..models.wireframe import Wireframe, HtmlWireframe, PreviewWireframe
from ..parser.screen_parser import find_screen, parse_screens, parse_screens_permissive
from ..prompts.wireframe import (
    build_wireframe_prompt,
    build_html_wireframe_prompt,
    build_preview_prompt,
)
from ..storage.base import BaseStore, WIREFRAMES, WIREFRAMES_HTML, WIREFRAMES_PREVIEW
from ..utils.id_generator import content_hash, truncate_string
from ..utils.logger import get_logger
from ..validator.response_cleaner import ResponseFormat, clean_response
from ..validator.tree_validator import parse_wireframe_tree

logger = get_logger(__name__)


Artifact = Union[Wireframe, HtmlWireframe, PreviewWireframe]


@dataclass
class WorkUnit:
    """What one producer call generates: a prompt plus where its result goes."""
    project_id: str
    screen_index: int
    screen_name: str
    prompt: str
    screen_hash: str = ""


def _call_backend(client: BaseLLMClient, prompt: str, **kwargs) -> str:
    response = client.generate(prompt, **kwargs)
    if not response.success:
        logger.error(f"Backend call failed: {response.error_message}")
        raise GenerationFailed(response.error_message or "Generation backend returned an error")
    return response.content


class WireframeProducer(ABC):
    """
    Abstract base class for wireframe artifact producers.

    Subclasses differ in how they locate their input, which backend they
    call and how their artifact is keyed in the store.
    """

    collection: str = ""
    key_fields: tuple = ()

    @property
    @abstractmethod
    def format(self) -> WireframeFormat:
        """Artifact variant produced."""
        pass

    @property
    def per_screen(self) -> bool:
        """True when one artifact is generated per screen."""
        return True

    @abstractmethod
    def select(self, project_id: str, document_text: str, screen_index: int = 0) -> WorkUnit:
        """
        Locate the unit of work and build its prompt.

        Raises:
            NotFound: If the screen index does not exist (strict variants)
            MissingPrerequisite: If the document yields nothing to generate
        """
        pass

    @abstractmethod
    def produce(self, unit: WorkUnit) -> Artifact:
        """
        Call the backend and validate its response.

        Raises:
            GenerationFailed: If the backend call errored
            MalformedResponse: If the response failed validation
        """
        pass

    def persist(self, store: BaseStore, artifact: Artifact) -> Dict[str, Any]:
        """Write the artifact with this variant's replace policy."""
        return store.upsert(self.collection, artifact.to_record(), self.key_fields)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(format={self.format.value})"


class TreeWireframeProducer(WireframeProducer):
    """JSON element-tree wireframes for every screen at once."""

    collection = WIREFRAMES
    key_fields = ("project_id",)

    def __init__(self, llm_client: BaseLLMClient):
        self.llm_client = llm_client

    @property
    def format(self) -> WireframeFormat:
        return WireframeFormat.TREE

    @property
    def per_screen(self) -> bool:
        return False

    def select(self, project_id: str, document_text: str, screen_index: int = 0) -> WorkUnit:
        # The whole document goes to the generator; screen_index is unused
        return WorkUnit(
            project_id=project_id,
            screen_index=0,
            screen_name="",
            prompt=build_wireframe_prompt(document_text),
            screen_hash=content_hash(document_text),
        )

    def produce(self, unit: WorkUnit) -> Wireframe:
        raw = _call_backend(self.llm_client, unit.prompt)
        payload = clean_response(raw, ResponseFormat.TREE)
        result = parse_wireframe_tree(payload, raw_response=raw)

        logger.info(
            f"Validated {len(result.screens)} screens "
            f"({len(result.warnings)} normalization warnings)"
        )
        return Wireframe(project_id=unit.project_id, screens=result.screens)

    def persist(self, store: BaseStore, artifact: Artifact) -> Dict[str, Any]:
        return store.replace(self.collection, artifact.to_record(), self.key_fields)


class HtmlWireframeProducer(WireframeProducer):
    """Styled markup wireframe for one screen."""

    collection = WIREFRAMES_HTML
    key_fields = ("project_id", "screen_index")

    def __init__(self, llm_client: BaseLLMClient, max_tokens: Optional[int] = None):
        self.llm_client = llm_client
        self.max_tokens = max_tokens

    @property
    def format(self) -> WireframeFormat:
        return WireframeFormat.HTML

    def select(self, project_id: str, document_text: str, screen_index: int = 0) -> WorkUnit:
        screen = find_screen(document_text, screen_index)
        if screen is None:
            count = len(parse_screens(document_text))
            raise NotFound(f"Screen {screen_index} not found ({count} screens in document)")

        return WorkUnit(
            project_id=project_id,
            screen_index=screen.index,
            screen_name=screen.name,
            prompt=build_html_wireframe_prompt(screen.content),
            screen_hash=screen.content_hash,
        )

    def produce(self, unit: WorkUnit) -> HtmlWireframe:
        kwargs = {"max_tokens": self.max_tokens} if self.max_tokens else {}
        raw = _call_backend(self.llm_client, unit.prompt, **kwargs)
        html = clean_response(raw, ResponseFormat.HTML)

        if not html:
            logger.error(f"Empty markup for screen {unit.screen_index}: {truncate_string(raw, 200)}")
            raise MalformedResponse("Generator returned empty markup", raw_response=raw)

        return HtmlWireframe(
            project_id=unit.project_id,
            screen_index=unit.screen_index,
            screen_name=unit.screen_name,
            html_content=html,
            screen_hash=unit.screen_hash,
        )


class PreviewWireframeProducer(WireframeProducer):
    """Hosted UI preview for one screen, from loosely structured documents."""

    collection = WIREFRAMES_PREVIEW
    key_fields = ("project_id", "screen_index")

    def __init__(self, ui_client: BaseUIClient):
        self.ui_client = ui_client

    @property
    def format(self) -> WireframeFormat:
        return WireframeFormat.PREVIEW

    def select(self, project_id: str, document_text: str, screen_index: int = 0) -> WorkUnit:
        screens = parse_screens_permissive(document_text)
        if not screens:
            raise MissingPrerequisite(
                "No screen found in the screens document",
                document_type=DocumentType.SCREENS_PROMPTS.value,
            )

        if not 0 <= screen_index < len(screens):
            logger.warning(
                f"Screen {screen_index} out of range ({len(screens)} screens), using the first screen"
            )
            screen_index = 0

        screen = screens[screen_index]
        return WorkUnit(
            project_id=project_id,
            screen_index=screen_index,
            screen_name=screen.name,
            prompt=build_preview_prompt(screen),
        )

    def produce(self, unit: WorkUnit) -> PreviewWireframe:
        response = self.ui_client.create(unit.prompt)
        if not response.success:
            logger.error(f"UI generation failed: {response.error_message}")
            raise GenerationFailed(response.error_message or "UI generation backend returned an error")

        return PreviewWireframe(
            project_id=unit.project_id,
            screen_index=unit.screen_index,
            screen_name=unit.screen_name,
            chat_id=response.chat_id,
            demo_url=response.demo_url,
        )


def create_producer(
    wireframe_format: Union[WireframeFormat, str],
    llm_client: Optional[BaseLLMClient] = None,
    ui_client: Optional[BaseUIClient] = None,
    config: Optional[GenerationConfig] = None,
) -> WireframeProducer:
    """
    Build the producer for a wireframe variant.

    Args:
        wireframe_format: Variant to produce
        llm_client: Text backend (tree and html variants)
        ui_client: UI backend (preview variant)
        config: Generation settings (html output budget)

    Raises:
        ConfigurationError: If the variant is unknown or its backend is missing
    """
    if isinstance(wireframe_format, str):
        wireframe_format = WireframeFormat.from_string(wireframe_format)
    config = config or GenerationConfig()

    if wireframe_format is WireframeFormat.PREVIEW:
        if ui_client is None:
            raise ConfigurationError("The preview variant requires a UI generation client")
        return PreviewWireframeProducer(ui_client)

    if llm_client is None:
        raise ConfigurationError(f"The {wireframe_format.value} variant requires a text generation client")

    if wireframe_format is WireframeFormat.TREE:
        return TreeWireframeProducer(llm_client)
    return HtmlWireframeProducer(llm_client, max_tokens=config.html_max_tokens)
