import argparse
import os
from datetime import datetime

import yaml

registry = {'init': {}, 'worker': {}, 'post': {}}

REQUIRED_KEYS = {
    'system': ['name'],
    'orbit': ['u0', 'period'],
    'output': ['directory'],
}


def register(registry, kind, task):
    def decorator(func):
        registry[kind][task] = func
        return func
    return decorator


def parse_arguments(argv):
    parser = argparse.ArgumentParser(description="Reduce a periodic orbit to its minimal period")
    parser.add_argument('config', help="path to the task configuration (yaml)")
    return parser.parse_args(argv)


def get_configuration(config_path):
    with open(config_path) as f:
        config = yaml.safe_load(f)
    validate_configuration(config)
    return config


def validate_configuration(config):
    if not isinstance(config, dict):
        raise ValueError("Configuration must be a mapping")
    if 'task' not in config:
        raise ValueError("Configuration missing 'task'")
    if config['task'] not in registry['worker']:
        raise ValueError(f"Unknown task '{config['task']}', available: {sorted(registry['worker'])}")
    for section, keys in REQUIRED_KEYS.items():
        if section not in config:
            raise ValueError(f"Configuration missing '{section}' section")
        for key in keys:
            if key not in config[section]:
                raise ValueError(f"Configuration missing {section}.{key}")


def make_final_outname(config, name, extension, start_time):
    target_dir = config['output']['directory']
    os.makedirs(target_dir, exist_ok=True)
    time_stamp = start_time.strftime('%Y-%m-%d_%H-%M-%S')
    return os.path.join(target_dir, f"{config['task']}_{name}_{time_stamp}.{extension}")


def workflow(config, init_func, worker, post_process):
    start_time = datetime.now()
    init_result = init_func(config, start_time)
    worker_result = worker(config, init_result, start_time)
    return post_process(config, init_result, worker_result, start_time)


def run_task(config):
    task_name = config['task']
    return workflow(config,
                    registry['init'][task_name],
                    registry['worker'][task_name],
                    registry['post'][task_name])
