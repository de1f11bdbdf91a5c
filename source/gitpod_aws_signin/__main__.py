# ABOUTME: Module entry point so the tool runs with `python -m gitpod_aws_signin`
# ABOUTME: Delegates to the cleo application

from gitpod_aws_signin.cli import main

if __name__ == "__main__":
    main()
