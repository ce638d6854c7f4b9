"""Classification viewer UI package.

Toolkit-free controllers live in :mod:`.controllers`; Tkinter widgets for the
desktop browser live in :mod:`.widgets`. Nothing is imported eagerly so the
controllers stay usable without a Tk installation.
"""

__all__: list[str] = []
