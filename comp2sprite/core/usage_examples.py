"""Markdown companion showing how to play back an exported sheet."""

from __future__ import annotations

from . import Manifest

_TEMPLATE = """# Sprite Sheet Usage Examples

Generated from: {comp_name}

## File Information
- **Sprite Sheet**: {sheet_name}
- **Metadata**: {manifest_name}
- **Frames**: {frame_count} frames
- **Layout**: {cols} columns x {rows} rows
- **Frame Size**: {frame_width}x{frame_height} px
- **Frame Time**: {frame_time_ms:.3f} ms

## JavaScript (ES6+)

```javascript
class SpriteAnimation {{
  constructor(imagePath, metadata) {{
    this.image = new Image();
    this.image.src = imagePath;
    this.metadata = metadata;
    this.currentFrame = 0;
    this.frameTime = metadata.animation.frameTime * 1000;
    this.lastFrameTime = 0;
  }}

  update(currentTime) {{
    if (currentTime - this.lastFrameTime >= this.frameTime) {{
      this.currentFrame = (this.currentFrame + 1) % this.metadata.frames.length;
      this.lastFrameTime = currentTime;
    }}
  }}

  draw(ctx, x, y) {{
    const frame = this.metadata.frames[this.currentFrame];
    ctx.drawImage(
      this.image,
      frame.x, frame.y, frame.width, frame.height,
      x, y, frame.width, frame.height
    );
  }}
}}
```

## Python (Pillow)

```python
import json
from PIL import Image

with open("{manifest_name}") as handle:
    metadata = json.load(handle)

sheet = Image.open("{sheet_name}")
frames = [
    sheet.crop((f["x"], f["y"], f["x"] + f["width"], f["y"] + f["height"]))
    for f in metadata["frames"]
]
duration_ms = int(metadata["animation"]["frameTime"] * 1000)
```
"""


def render_usage_examples(manifest: Manifest, sheet_name: str, manifest_name: str) -> str:
    return _TEMPLATE.format(
        comp_name=manifest.composition.name,
        sheet_name=sheet_name,
        manifest_name=manifest_name,
        frame_count=len(manifest.frames),
        cols=manifest.layout.cols,
        rows=manifest.layout.rows,
        frame_width=manifest.frame_width,
        frame_height=manifest.frame_height,
        frame_time_ms=manifest.frame_time * 1000,
    )
