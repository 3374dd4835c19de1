"""DMG settings for dmgbuild.

Executed by ``python -m dmgbuild -s settings.py``; every value arrives
through ``-D key=value`` defines computed by the DMG target.

Coordinate system:
- x, y = icon center position in points from left/top of window
- contents entries without a path place the application bundle
"""

import json
import os.path

# Variables passed via dmgbuild --define
application = defines["app"]  # noqa: F821 - 'defines' is injected by dmgbuild
appname = os.path.basename(application)

contents = json.loads(defines.get("contents", "[]"))  # noqa: F821

# Volume contents
files = [application]
symlinks = {}
icon_locations = {}

for entry in contents:
    position = (int(entry["x"]), int(entry["y"]))
    path = entry.get("path")
    kind = entry.get("type")
    if path is None:
        icon_locations[entry.get("name") or appname] = position
        continue
    name = entry.get("name") or os.path.basename(path.rstrip("/")) or path
    if kind == "link":
        symlinks[name] = path
    elif path not in files:
        files.append(path if entry.get("name") is None else (path, name))
    icon_locations[name] = position

# Window appearance: background is an image path, dmgbuild's builtin-arrow or a color
background = defines.get("background") or defines.get("background_color")  # noqa: F821
icon = defines.get("icon")  # noqa: F821 - Volume icon (.icns)
icon_size = int(defines.get("icon_size", "80"))  # noqa: F821
text_size = int(defines.get("text_size", "12"))  # noqa: F821

window_x = int(defines.get("window_x", "400"))  # noqa: F821
window_y = int(defines.get("window_y", "100"))  # noqa: F821
window_width = int(defines.get("window_width", "540"))  # noqa: F821
window_height = int(defines.get("window_height", "380"))  # noqa: F821
window_rect = ((window_x, window_y), (window_width, window_height))

# Disable Finder's auto-arrange (required for manual positioning)
arrange_by = None

show_status_bar = False
show_tab_view = False
show_toolbar = False
show_pathbar = False
show_sidebar = False

# UDZO (zlib), UDBZ (bzip2), UDRO (uncompressed read-only), ...
format = defines.get("format", "UDZO")  # noqa: F821
