"""
Same as the console script: ``python -m structural_reflection -h`` explains the arguments.
"""
from .cmdline import main

main()
