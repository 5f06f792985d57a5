import os
import sys

_TESTS_DIR = os.path.dirname(__file__)

# Engine modules live flat in backend/ and import each other by bare name
sys.path.insert(0, os.path.join(_TESTS_DIR, "..", "backend"))

# check_plan.py CLI
sys.path.insert(0, os.path.join(_TESTS_DIR, "..", "scripts"))

# plan_utils builders, shared by tests/ and tests/backend_tests/
sys.path.insert(0, _TESTS_DIR)
