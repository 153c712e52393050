from stickerfield.cli import main

main()
