from .utils import combine_paths, extend

__all__ = ["combine_paths", "extend"]
