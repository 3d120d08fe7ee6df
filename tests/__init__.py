"""jmeter-influx test suite.

Unit tests live under tests/unit, one module per library module:
- test_encoding.py / test_sample_filter.py / test_user_tags.py: value encoding and parameter parsing
- test_mapper.py / test_annotations.py / test_aggregate.py: line protocol building
- test_listener.py: setup / batch / teardown lifecycle
- test_senders.py: sender registry and http, udp, memory transports
- test_config_loader.py / test_results.py / test_replay.py: YAML configs, JTL files and the CLI
"""
