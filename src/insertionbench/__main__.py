from insertionbench.bench.cli import main

main()
