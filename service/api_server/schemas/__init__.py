from .explore import HtmlViewParameters, RelatedResourceView, ShortDescriptionView

__all__ = [
    "HtmlViewParameters",
    "RelatedResourceView",
    "ShortDescriptionView",
]
