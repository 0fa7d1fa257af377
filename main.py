import sys

import minperiod.computing.workers_minimal_period  # registers the minimal_period task
from minperiod.computing.workflow import parse_arguments, get_configuration, run_task

if __name__ == "__main__":
    args = parse_arguments(sys.argv[1:])
    configDict = get_configuration(args.config)
    run_task(configDict)
