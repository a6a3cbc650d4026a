"""Names shared by the dashboard views."""

from .. import __version__

# Views
VIEW_MINING = "mining"
VIEW_VERSION = "version"

# Layout regions
ROOT_STACK = "root_stack"
MAIN_MENU = "main_menu"
TITLE = "title"

TITLE_TEXT = f"Miner Dashboard Version {__version__}"

# Menu navigation (blessed key names)
KEY_MENU_UP = "KEY_UP"
KEY_MENU_DOWN = "KEY_DOWN"

# Mining device table columns
TABLE_MINING_COLUMN_DEVICE = "Device"
TABLE_MINING_COLUMN_SOLVER = "Solver"
TABLE_MINING_COLUMN_GPS = "Graphs/s"
TABLE_MINING_COLUMN_SOLUTIONS = "Solutions"
TABLE_MINING_COLUMN_LAST_SOLVE = "Last Solve"
TABLE_MINING_COLUMN_STATUS = "Status"
