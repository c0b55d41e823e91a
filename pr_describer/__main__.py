from pr_describer.cli import main

main()
