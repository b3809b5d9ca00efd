"""Page layout: text measurement, flow placement, decorations and assembly."""
