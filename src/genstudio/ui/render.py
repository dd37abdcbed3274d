"""Output rendering.

:func:`render` maps a :class:`GenerationResult` and the model's output kind to
an :class:`OutputView`: a plain, immutable description of what the output
panel should show. It is a pure function with no state, so calling it twice
with the same arguments yields equal views; the Gradio layer
(:mod:`genstudio.ui.components`) only translates views into component
updates.

View kinds
----------
- ``loading``      a request is in flight
- ``error``        the result carries an error (takes precedence over output)
- ``placeholder``  nothing generated yet
- ``images``       image grid of up to four images (1 column for one image,
                   2 columns otherwise; with exactly three images the last
                   one spans both columns)
- ``text``         plain text (sequences are concatenated)
- ``json``         pretty-printed JSON
- ``unsupported``  output shape does not fit the declared kind
"""

import json
from dataclasses import dataclass
from typing import Any

from genstudio.core.results import GenerationResult

PLACEHOLDER_MESSAGE = "Imagine it. Generate it"
ERROR_TITLE = "Generation Failed"
UNSUPPORTED_MESSAGE = "Unsupported output format"
NO_PROMPT_TEXT = "No prompt provided"
MAX_GRID_IMAGES = 4


@dataclass(frozen=True)
class GridCell:
    url: str
    download_name: str
    col_span: int = 1
    centered: bool = False


@dataclass(frozen=True)
class OutputView:
    kind: str
    title: str = ""
    message: str = ""
    cells: tuple[GridCell, ...] = ()
    columns: int = 1
    text: str = ""
    prompt: str = ""
    duration_seconds: str | None = None

    @property
    def image_urls(self) -> list[str]:
        return [cell.url for cell in self.cells]

    @property
    def inference_info(self) -> str:
        if self.duration_seconds is None:
            return ""
        return f"Inference time: {self.duration_seconds}s"


def grid_columns(count: int) -> int:
    return 1 if count <= 1 else 2


def layout_images(urls: list[str]) -> tuple[tuple[GridCell, ...], int]:
    """Place image URLs on the output grid.

    At most :data:`MAX_GRID_IMAGES` images are shown; extra URLs are dropped.

    Returns:
        Tuple of (cells, column count)
    """
    urls = urls[:MAX_GRID_IMAGES]
    count = len(urls)
    columns = grid_columns(count)
    cells = []
    for index, url in enumerate(urls):
        spans_row = count == 3 and index == 2
        cells.append(
            GridCell(
                url=url,
                download_name=f"generated-image-{index + 1}.jpg",
                col_span=2 if spans_row else 1,
                centered=spans_row,
            )
        )
    return tuple(cells), columns


def _image_urls(output: Any) -> list[str] | None:
    if isinstance(output, str):
        return [output]
    if isinstance(output, (list, tuple)) and all(isinstance(item, str) for item in output):
        return [str(item) for item in output]
    return None


def render(
    result: GenerationResult | None,
    output_kind: str,
    *,
    prompt: str | None = None,
    loading: bool = False,
) -> OutputView:
    """Describe how to display a generation result.

    Args:
        result: The latest result, or None before the first submission
        output_kind: ``image``, ``text`` or ``json``
        prompt: Prompt that produced the result (shown beside the output)
        loading: Whether a request is currently in flight

    Returns:
        The view to display. Never raises for well-typed input.
    """
    if loading:
        return OutputView(kind="loading", message="Generating...")

    if result is not None and result.error:
        return OutputView(kind="error", title=ERROR_TITLE, message=result.error)

    if result is None or result.output is None or result.output == "" or result.output == []:
        return OutputView(kind="placeholder", message=PLACEHOLDER_MESSAGE)

    output = result.output
    shared = {
        "prompt": prompt or NO_PROMPT_TEXT,
        "duration_seconds": result.duration_seconds,
    }

    if output_kind == "image":
        urls = _image_urls(output)
        if not urls:
            return OutputView(kind="unsupported", message=UNSUPPORTED_MESSAGE, **shared)
        cells, columns = layout_images(urls)
        title = "Generated Images" if len(cells) > 1 else "Generated Image"
        return OutputView(kind="images", title=title, cells=cells, columns=columns, **shared)

    if output_kind == "text":
        if isinstance(output, (list, tuple)):
            text = "".join(str(item) for item in output)
        else:
            text = str(output)
        return OutputView(kind="text", title="Generated Text", text=text, **shared)

    if output_kind == "json":
        try:
            text = json.dumps(output, indent=2)
        except (TypeError, ValueError):
            return OutputView(kind="unsupported", message=UNSUPPORTED_MESSAGE, **shared)
        return OutputView(kind="json", title="Generated Output (JSON)", text=text, **shared)

    return OutputView(kind="unsupported", message=UNSUPPORTED_MESSAGE, **shared)
