from cepquery.cli import main

main()
