"""Deliverable index: the "by folder" and "by order" projections of a job.

Everything here is a pure function of ``(folders, files, orders)`` so the
two views can be rebuilt at any time and always agree on the file set.
Files are ordered by ``(uploaded_at, id)`` inside every group.
"""

from collections.abc import Iterable
from typing import Any
from uuid import UUID

from app.shared import folder_path as fp
from models import DeliverableFile, Folder, Order

UNASSIGNED_FOLDER_NAME = "All Files"


def is_deliverable(file: DeliverableFile, hidden_prefix: str = ".") -> bool:
    """A file is ready for the client once it has a URL and is not hidden."""
    if hidden_prefix and (file.file_name or "").startswith(hidden_prefix):
        return False
    return bool(file.download_url and file.download_url.strip())


def effective_visibility(folders: Iterable[Folder]) -> dict[str, bool]:
    """Map each folder path to its public visibility.

    A folder is publicly visible only when it and every ancestor present in
    the tree are visible.
    """
    own = {folder.path: bool(folder.is_visible) for folder in folders}
    return {path: is_path_visible(path, own) for path in own}


def is_path_visible(path: str, own_visibility: dict[str, bool]) -> bool:
    for candidate in [*fp.ancestors(path), path]:
        if not own_visibility.get(candidate, True):
            return False
    return True


def sort_files(files: Iterable[DeliverableFile]) -> list[DeliverableFile]:
    return sorted(files, key=lambda f: (f.uploaded_at, str(f.id)))


def select_files(
    folders: Iterable[Folder],
    files: Iterable[DeliverableFile],
    public: bool,
    hidden_prefix: str = ".",
) -> list[DeliverableFile]:
    """The file set both views are built from.

    Not-ready files are always dropped. On the public page files below a
    hidden folder are dropped as well.
    """
    selected = [f for f in files if is_deliverable(f, hidden_prefix)]
    if public:
        own = {folder.path: bool(folder.is_visible) for folder in folders}
        selected = [
            f for f in selected if f.folder_path is None or is_path_visible(f.folder_path, own)
        ]
    return sort_files(selected)


def file_entry(file: DeliverableFile, open_file_ids: set[UUID] | None = None) -> dict[str, Any]:
    return {
        "id": file.id,
        "order_id": file.order_id,
        "folder_path": file.folder_path,
        "file_name": file.file_name,
        "original_name": file.original_name,
        "file_size": file.file_size,
        "mime_type": file.mime_type,
        "download_url": file.download_url,
        "uploaded_at": file.uploaded_at,
        "has_open_comments": file.id in (open_file_ids or set()),
    }


def by_folder(
    folders: Iterable[Folder],
    files: Iterable[DeliverableFile],
    public: bool = False,
    hidden_prefix: str = ".",
    open_file_ids: set[UUID] | None = None,
) -> list[dict[str, Any]]:
    """Group files by folder.

    Internal listings keep every folder, including hidden and empty ones.
    The public page keeps only effectively visible folders. Files whose
    path has no folder row get a group of their own; files without a path
    are grouped per order under :data:`UNASSIGNED_FOLDER_NAME`.
    """
    folders = list(folders)
    selected = select_files(folders, files, public, hidden_prefix)
    visibility = effective_visibility(folders)

    by_path: dict[str, list[DeliverableFile]] = {}
    unassigned: dict[UUID, list[DeliverableFile]] = {}
    for file in selected:
        if file.folder_path is None:
            unassigned.setdefault(file.order_id, []).append(file)
        else:
            by_path.setdefault(file.folder_path, []).append(file)

    groups = []
    for folder in sorted(folders, key=lambda f: (f.display_order, f.path)):
        if public and not visibility[folder.path]:
            continue
        groups.append(
            _group(
                folder_path=folder.path,
                depth=folder.depth,
                editor_folder_name=folder.editor_folder_name,
                partner_folder_name=folder.partner_folder_name,
                is_visible=visibility[folder.path] if public else bool(folder.is_visible),
                order_id=folder.order_id,
                files=by_path.pop(folder.path, []),
                open_file_ids=open_file_ids,
            )
        )

    for path in sorted(by_path):
        groups.append(
            _group(
                folder_path=path,
                depth=fp.depth(path),
                editor_folder_name=fp.name(path),
                partner_folder_name=None,
                is_visible=True,
                order_id=None,
                files=by_path[path],
                open_file_ids=open_file_ids,
            )
        )

    for order_id, order_files in unassigned.items():
        groups.append(
            _group(
                folder_path=None,
                depth=0,
                editor_folder_name=UNASSIGNED_FOLDER_NAME,
                partner_folder_name=None,
                is_visible=True,
                order_id=order_id,
                files=order_files,
                open_file_ids=open_file_ids,
            )
        )
    return groups


def by_order(
    orders: Iterable[Order],
    folders: Iterable[Folder],
    files: Iterable[DeliverableFile],
    public: bool = False,
    hidden_prefix: str = ".",
    open_file_ids: set[UUID] | None = None,
) -> list[dict[str, Any]]:
    """Group files by order regardless of folder.

    Orders without files are left out of the public page.
    """
    selected = select_files(folders, files, public, hidden_prefix)
    grouped: dict[UUID, list[DeliverableFile]] = {}
    for file in selected:
        grouped.setdefault(file.order_id, []).append(file)

    groups = []
    for order in sorted(orders, key=lambda o: (o.created_at, o.order_number)):
        order_files = grouped.pop(order.id, [])
        if public and not order_files:
            continue
        groups.append(
            {
                "order_id": order.id,
                "order_number": order.order_number,
                "files": [file_entry(f, open_file_ids) for f in order_files],
            }
        )

    # Files of orders that were not passed in still belong to the file set
    for order_id, order_files in grouped.items():
        groups.append(
            {
                "order_id": order_id,
                "order_number": None,
                "files": [file_entry(f, open_file_ids) for f in order_files],
            }
        )
    return groups


def revision_status(order: Order) -> dict[str, Any]:
    max_rounds = order.max_revision_rounds or 0
    used_rounds = order.used_revision_rounds or 0
    return {
        "order_id": order.id,
        "max_rounds": max_rounds,
        "used_rounds": used_rounds,
        "remaining_rounds": max(0, max_rounds - used_rounds),
    }


def count_files(groups: Iterable[dict[str, Any]]) -> int:
    return sum(len(group["files"]) for group in groups)


def _group(
    folder_path: str | None,
    depth: int,
    editor_folder_name: str,
    partner_folder_name: str | None,
    is_visible: bool,
    order_id: UUID | None,
    files: list[DeliverableFile],
    open_file_ids: set[UUID] | None,
) -> dict[str, Any]:
    return {
        "folder_path": folder_path,
        "parent_path": fp.parent(folder_path) if folder_path else None,
        "depth": depth,
        "editor_folder_name": editor_folder_name,
        "partner_folder_name": partner_folder_name,
        "display_name": partner_folder_name or editor_folder_name,
        "is_visible": is_visible,
        "order_id": order_id,
        "file_count": len(files),
        "files": [file_entry(f, open_file_ids) for f in files],
    }
