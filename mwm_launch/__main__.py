"""Allow `python -m mwm_launch`"""

from mwm_launch.cli import main

main()
