from .constants import CREPO_NAME
from .main import main

main(prog_name=CREPO_NAME)
