"""
Chat system prompts.

Renders the system instruction sent to the generative model: the wine
assistant persona, the numbered source context, the response-style
instruction for the classified query and any uploaded image context.

Dependencies: langchain_core.prompts
System role: Prompt templates for the chat model
"""

from collections.abc import Sequence

from langchain_core.prompts import PromptTemplate

from waine.models.chat import QueryCategory
from waine.models.chunk import DeduplicatedSource, ScoredChunk

NO_CONTEXT = "No relevant context found."
CONTEXT_SEPARATOR = "\n\n---\n\n"

SYSTEM_PROMPT = PromptTemplate.from_template(
    """I'm your knowledgeable wine assistant, Waine, ready to help with your questions.
I'll provide answers based on the information available to me.
This information is organised into numbered sources (e.g., [1], [2], ...).
When I use information from a specific source, I'll cite the source number(s) in square brackets, like [1] or [2, 3], right after the information. This way, you'll know exactly where it came from.
If I don't have the specific information you're looking for, I'll let you know.
My goal is to be clear, helpful, and share interesting wine facts!

Please respond using Australian English spelling conventions (e.g., colour, flavour, organised, realise, centre).

Sourced Information:
{context}"""
)

SYSTEM_PROMPT_WITH_DOC = PromptTemplate.from_template(
    """I'm your knowledgeable wine assistant, and I'll help you with your questions about the document "{document_name}".
I'll answer your questions about "{document_name}" using the specific details provided for it below.
These details are broken down into numbered parts (e.g., [1], [2], ...) specific to "{document_name}".
When I use information from one of these parts, I'll cite the source number(s) in square brackets, like [1] or [2, 3], right after it. This helps you see where the information came from.
If the information for "{document_name}" doesn't cover your question, I'll make sure to tell you.
I aim to be clear, helpful and share interesting facts about "{document_name}"!

Please respond using Australian English spelling conventions (e.g., colour, flavour, organised, realise, centre).

Information for "{document_name}":
{context}"""
)

RESPONSE_STYLE = {
    QueryCategory.CONVERSATIONAL: (
        "Response style: the user is making conversation. Reply briefly and warmly "
        "in one or two sentences without citations unless you use a source."
    ),
    QueryCategory.SPECIFIC: (
        "Response style: the user asked a direct factual question. Answer it directly "
        "in a few sentences, lead with the answer and cite the supporting sources."
    ),
    QueryCategory.OPEN_ENDED: (
        "Response style: the user asked an open-ended question. Give a well-structured, "
        "thorough explanation using short paragraphs or lists, citing sources throughout."
    ),
}

IMAGE_CONTEXT_HEADER = "Uploaded Image Context:"


def _describe_source(source: DeduplicatedSource) -> str:
    chunk = source.primary_chunk
    label = chunk.source_name or f"Document {chunk.document_id}"
    if chunk.page_number is not None:
        label += f", page {chunk.page_number}"
    if source.additional_pages:
        label += " (also pages " + ", ".join(str(page) for page in source.additional_pages) + ")"
    return label


def format_numbered_context(
    sources: Sequence[DeduplicatedSource],
    chunks: Sequence[ScoredChunk] = (),
) -> str:
    """
    Render sources as a numbered context block.

    Each source shows its primary chunk first, followed by the other matched
    chunks of the same document, under the source's citation number.

    Args:
        sources: Renumbered sources
        chunks: Raw chunks the sources were built from

    Returns:
        str: Context text, or a placeholder when there are no sources
    """
    if not sources:
        return NO_CONTEXT

    blocks = []
    for source in sources:
        primary = source.primary_chunk
        related = [
            chunk.content
            for chunk in chunks
            if chunk.document_id == source.document_id and chunk != primary
        ]
        body = "\n\n".join([primary.content, *related])
        blocks.append(f"[{source.citation_index}] Source: {_describe_source(source)}\n{body}")
    return CONTEXT_SEPARATOR.join(blocks)


def build_system_instruction(
    sources: Sequence[DeduplicatedSource],
    chunks: Sequence[ScoredChunk],
    category: QueryCategory,
    document_name: str | None = None,
    image_context: str | None = None,
) -> str:
    """
    Build the full system instruction for one chat turn.

    Args:
        sources: Renumbered sources
        chunks: Raw chunks behind the sources
        category: Classified response shape
        document_name: Document the conversation is scoped to, if any
        image_context: Analysis of an uploaded image, if any

    Returns:
        str: System instruction text
    """
    context = format_numbered_context(sources, chunks)
    if document_name:
        prompt = SYSTEM_PROMPT_WITH_DOC.format(document_name=document_name, context=context)
    else:
        prompt = SYSTEM_PROMPT.format(context=context)

    sections = [prompt, RESPONSE_STYLE[category]]
    if image_context:
        sections.append(f"{IMAGE_CONTEXT_HEADER}\n{image_context.strip()}")
    return "\n\n".join(sections)
