from contract_artifacts.cli import main

main()
