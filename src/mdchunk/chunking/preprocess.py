import logging
from dataclasses import dataclass, replace

from mdchunk.document.nodes import FORMATTING_TYPES, Node, Parent, Root

from .options import NodeRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformContext:
    root: Root
    parent: Parent | None = None
    index: int | None = None


def preprocess(root: Root, rules: dict[str, NodeRule]) -> Root:
    """Apply rule transforms to every matching node, children first.

    A transform returns a replacement node, the node itself to keep it, or
    ``None`` to drop it. Paragraphs left without children are dropped too.
    """
    transforms = {
        key: rule.transform for key, rule in rules.items() if rule.transform is not None
    }
    if not transforms:
        return root

    return replace(root, children=_transform_children(root, root, transforms))


def _transform_children(
    node: Parent, root: Root, transforms: dict
) -> tuple[Node, ...]:
    children = []
    for index, child in enumerate(node.children):
        if isinstance(child, Parent):
            child = replace(
                child, children=_transform_children(child, root, transforms)
            )
        transform = transforms.get(child.type)
        if transform is None and child.type in FORMATTING_TYPES:
            transform = transforms.get("formatting")
        if transform is not None:
            context = TransformContext(root=root, parent=node, index=index)
            replaced = transform(child, context)
            if replaced is None:
                logger.debug("Transform removed %s node", child.type)
                continue
            child = replaced
        if child.type == "paragraph" and not child.children:  # type: ignore[attr-defined]
            continue
        children.append(child)
    return tuple(children)
