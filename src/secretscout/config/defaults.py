"""Starter .secretscout.toml template."""

DEFAULT_TOML = """\
# secretscout configuration
version = "1.0"

[scan]
threads = -1              # -1 = one worker per CPU
confidence_level = 3      # 1 (noisy) .. 5 (only high-confidence signatures)
max_file_size_mb = 10
commit_depth = -1         # -1 = walk the full history
scan_tests = false
hide_secrets = false
# expand_orgs = false     # also scan the members of each organization

[ignore]
# extensions = ["svg", "lock"]          # added to the built-in image/pdf list
# paths = ["fixtures/", "third_party/"]  # substrings, case-insensitive

[signatures]
# file = "signatures.yaml"   # omit to use the bundled signatures

[output]
format = "terminal"       # terminal | json | csv
show_summary = true
"""
