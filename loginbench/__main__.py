from loginbench.cli import main

main()
