"""Allow running aika with python -m aika"""

from aika.cli import main

main()
