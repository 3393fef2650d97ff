from vendorprune.main import main

main()
