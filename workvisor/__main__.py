from workvisor.main import main

main()
