import logging
from dataclasses import dataclass
from typing import TypedDict

from langgraph.graph import END, START, StateGraph

from .config import Settings
from .errors import InvalidLinkError, MissingLinkError
from .fetcher import CaptionFetcher
from .generator import TextGenerator, generate_comments
from .shortcode import extract_shortcode
from .text import normalize_caption

logger = logging.getLogger(__name__)


class CommentState(TypedDict, total=False):
    link: str
    count: int | str | None
    shortcode: str
    raw_caption: str
    caption: str
    comments: list[str]


@dataclass
class CommentResult:
    caption: str
    comments: list[str]


def build_comment_graph(fetcher: CaptionFetcher, llm: TextGenerator, settings: Settings):
    """Compile extract -> fetch -> normalize -> generate. A failing node stops the run."""

    def extract_node(state: CommentState) -> CommentState:
        shortcode = extract_shortcode(state["link"])
        if not shortcode:
            raise InvalidLinkError()
        return {"shortcode": shortcode}

    def fetch_node(state: CommentState) -> CommentState:
        return {"raw_caption": fetcher.fetch(state["shortcode"])}

    def normalize_node(state: CommentState) -> CommentState:
        caption = normalize_caption(state["raw_caption"], collapse=fetcher.collapse_whitespace)
        return {"caption": caption}

    def generate_node(state: CommentState) -> CommentState:
        comments = generate_comments(state["caption"], state.get("count"), llm, settings)
        return {"comments": comments}

    workflow = StateGraph(CommentState)
    workflow.add_node("extract", extract_node)
    workflow.add_node("fetch", fetch_node)
    workflow.add_node("normalize", normalize_node)
    workflow.add_node("generate", generate_node)

    workflow.add_edge(START, "extract")
    workflow.add_edge("extract", "fetch")
    workflow.add_edge("fetch", "normalize")
    workflow.add_edge("normalize", "generate")
    workflow.add_edge("generate", END)

    return workflow.compile()


class CommentPipeline:
    def __init__(self, fetcher: CaptionFetcher, llm: TextGenerator, settings: Settings):
        self.fetcher = fetcher
        self.llm = llm
        self.settings = settings
        self.graph = build_comment_graph(fetcher, llm, settings)

    def run(self, link: str | None, count=None) -> CommentResult:
        if not isinstance(link, str) or not link.strip():
            raise MissingLinkError()
        logger.info("Generating comments for %s", link)
        final_state = self.graph.invoke({"link": link.strip(), "count": count})
        return CommentResult(caption=final_state["caption"], comments=final_state["comments"])
