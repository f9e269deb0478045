from .config import Settings, load_settings
from .errors import (
    ArtifactError,
    ChannelError,
    DependencyStreamError,
    JavacPipelineError,
    OptionsError,
    StageError,
    StageFailure,
    StageStateError,
    ToolInvocationError,
    ToolSpawnError,
    stage_error_from_exc,
)
from .fs import (
    copy_or_hardlink,
    ensure_parent,
    make_tmp_dir,
    relpath_posix,
    remove_tree,
    safe_unlink,
    walk_files,
    write_lines,
)
from .logging import (
    ILogger,
    bind,
    clear_bindings,
    configure_logging,
    default_logger,
    get_logger,
)
from .time import format_duration_ms, monotonic_ms, utc_now_iso

__all__ = [
    "ArtifactError",
    "ChannelError",
    "DependencyStreamError",
    "ILogger",
    "JavacPipelineError",
    "OptionsError",
    "Settings",
    "StageError",
    "StageFailure",
    "StageStateError",
    "ToolInvocationError",
    "ToolSpawnError",
    "bind",
    "clear_bindings",
    "configure_logging",
    "copy_or_hardlink",
    "default_logger",
    "ensure_parent",
    "format_duration_ms",
    "get_logger",
    "load_settings",
    "make_tmp_dir",
    "monotonic_ms",
    "relpath_posix",
    "remove_tree",
    "safe_unlink",
    "stage_error_from_exc",
    "utc_now_iso",
    "walk_files",
    "write_lines",
]
