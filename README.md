# tr7rt

Runtime building blocks for a game engine, in plain Python with no
third-party dependencies.

## Modules

- `tr7rt.errors`: `FatalError`, and `fatal_error(message, *args)`, which
  formats a printf-style message and raises `FatalError`.
- `tr7rt.mathutil`: `clamp`, a four-component `Vector`, and a column-major
  `Matrix` whose `transpose_to_rows()` returns its 16 values row by row.
- `tr7rt.trace`: hierarchical trace logs. A `TraceLog` has its own
  `TraceFilter` (`DEFAULT`, `ENABLED`, `DISABLED`); a `DEFAULT` log inherits
  its effective filter from its parent. Logs live in a `TraceRegistry`
  (`default_registry` unless one is passed). A `TraceMask` packs up to three
  log indices in 10-bit slots; `TraceRegistry.check_filter` rejects a mask if
  any named log is disabled. `TraceContext` writes a `[name|name] ` prefix,
  the message body and a closing newline; `trace_check_filter_and_print` does
  all three at once. Output goes to the backend from `get_backend()`, a
  `StreamTraceBackend` on standard error unless `set_backend` installs another.
- `tr7rt.filesystem`: the abstract `FileSystem`, `File`, `FileRequest` and
  `FileReceiver` interfaces, the `RequestStatus`, `RequestPriority` and
  `FileSystemStatus` enums, and two receivers: `UserBufferReceiver` (copies
  into a caller's `bytearray`) and `AllocatedReceiver` (allocates a buffer when
  a request starts and drops it when it ends).
- `tr7rt.debugfs`: blocking debug files. `DebugFileSystem.get_file()` returns
  a `LocalDebugFile` on the local disk; `file_exists` and `get_file_size`
  query by name. `DebugFileSystem.create()` / `destroy()` manage a shared
  instance returned by `debug_file_system()`.
- `tr7rt.filesources`: `FileSource` and `DiskFileSource`, which open files
  relative to a base path and read them through integer handles.
- `tr7rt.diskfs`: `DiskFileSystem`, a queued file system with a pool of 256
  requests. Reads are sector aligned (`round_to_sectors`) and go through a
  shared buffer; `update()` advances the head request and `synchronize()` runs
  until the queue is empty. High-priority requests are placed right after the
  head of the queue.
- `tr7rt.multifs`: `MultiFileSystem`, a stack of up to eight file systems;
  each request goes to the first member that has the file, and
  `FileNotFoundError` is raised when none does.
- `tr7rt.adpcm`: 4-bit ADPCM decoding of 36-byte blocks into 64 signed
  16-bit samples each (`decode`), `calc_table()` to cap step sizes at 0x1FFF,
  and `upload_sample`, which returns a `Sample` with its PCM data.
- `tr7rt.scene`: `Scene`, `SceneEntity`, `SceneId` and `SceneManager`.
  `Scene.render` calls `draw(matrix, False)` on each entity's drawable.
- `tr7rt.drawable`: `RenderPass` flags, the abstract `Drawable`, and
  `DrawableList`, which draws the most recently added drawable first.
- `tr7rt.vertexformat`: `DeclType`, `VertexElement`, `element_size`,
  `vertex_stride`, `VertexFormat` and `VertexFormatRegistry`. Elements after
  the end marker (`DECL_END`) are ignored.
- `tr7rt.game`: the start-up `INTERFACE_ITEMS` table, `initial_main_state`,
  `MainTracker.start`, `BuildConfig` / `setup_build_dir` for build-directory
  file names, `read_file` to read a whole file through any `FileSystem`, and
  104-byte `ChapterSpec` records (with `PlayerInventory`) via `from_bytes` and
  `to_bytes`.

## Install

    pip install .

For the test suite:

    pip install .[test]
    pytest

## Example

    from tr7rt.adpcm import decode
    from tr7rt.mathutil import clamp

    samples = decode(block_bytes, 1)   # 64 samples from one 36-byte block
    clamp(70000, -32768, 32767)        # 32767

    from tr7rt.diskfs import DiskFileSystem
    from tr7rt.game import read_file, setup_build_dir

    config = setup_build_dir("PC-W")
    config.unit_file_name("container1", "drm")   # 'PC-W\\container1.drm'

    fs = DiskFileSystem("data")
    data = read_file(fs, "notes.txt")            # bytes, or None if missing/empty

## What it does not do

The package is a set of libraries only. It has no command to run, no game
loop, and no rendering or audio output: scenes and drawables only call the
`draw` methods you supply, and decoded ADPCM samples are returned as
integers rather than played. There is no archive reader for packed game data;
`DiskFileSystem` and `MultiFileSystem` read plain files from disk or from
file systems you provide.