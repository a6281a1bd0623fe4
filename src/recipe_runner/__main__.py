from recipe_runner.cli.main import main

main()
