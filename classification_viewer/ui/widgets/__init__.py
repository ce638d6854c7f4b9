from .breadcrumb_widget import BreadcrumbItem, BreadcrumbWidget
from .classification_tree import ClassificationTreeWidget
from .detail_panel import DetailPanel
from .search_widget import SearchWidget

__all__ = [
    "BreadcrumbItem",
    "BreadcrumbWidget",
    "ClassificationTreeWidget",
    "DetailPanel",
    "SearchWidget",
]
